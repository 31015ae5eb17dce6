"""
fortiapi Command-Line Tools

- fortiapi-cmd:   run one JSON API transaction
- fortiapi-login: log in and spawn a shell with the session exported
"""
