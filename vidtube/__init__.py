"""
VidTube - Video Sharing Platform Backend

REST backend for user accounts, video publishing, social interactions
and channel analytics on top of MongoDB and Cloudinary.

Architecture:
- Each module is self-contained with clear interfaces
- Modules receive their collaborators through constructors
- Configuration is built once at startup and passed down explicitly

Modules:
- auth: Password hashing, token issuance/rotation, request verification
- storage: Document store access (MongoDB)
- aggregation: Multi-collection join pipelines
- media: Blob hosting uploads (Cloudinary)
- accounts, videos, comments, likes, tweets, playlists,
  subscriptions, dashboard: domain handlers
- api: HTTP routes, response envelope, error taxonomy
"""

__version__ = "1.0.0"
