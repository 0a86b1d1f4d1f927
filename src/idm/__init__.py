"""IDM: employee and role administration API."""
