"""Core domain package for imdbot.

Core contains frame decoding, command dispatch, search orchestration and the
startup checkpoints without any WebSocket, SQLite or HTTP specific code.
"""
