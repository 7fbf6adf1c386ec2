"""WebSocket terminal endpoint for termshell.

Serves one shell session per WebSocket connection so a browser terminal
can drive the shell with key and paste frames and render the output
frames it sends back.
"""
