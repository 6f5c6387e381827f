"""HTTP simulator service."""
