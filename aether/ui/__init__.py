"""NiceGUI interface - the browser side of the chat.

Delivers a responsive web UI with real-time streaming updates.

Responsibilities:
    - Transcript display with streaming indicator and citation cards
    - Text input and image attachment
    - Client-side SSE stream reduction into the message store
    - Optional password gate, clear and download actions

The message store is the single owner of transcript state; display code
only reads it.
"""
