"""
Chat API Server

FastAPI proxy between the Streamlit UI and the hosted chat-completion provider.

Endpoints:
- POST /api/chat: next assistant message for a conversation history
- GET /health: Health check

Usage:
    from api.app import create_app, run_server

    # Run server
    run_server(host="0.0.0.0", port=8000)

    # Or get app for custom deployment
    app = create_app()
"""

__version__ = "0.1.0"
