"""Task management API backed by Firebase Firestore."""

__version__ = "1.0.0"
