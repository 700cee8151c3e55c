"""Asyncio client for Lavalink nodes: models, REST, WebSocket, clusters and configuration."""