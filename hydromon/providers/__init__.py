from .firebase_provider import FirebaseProvider, provider_from_settings

__all__ = [
    "FirebaseProvider",
    "provider_from_settings"
]
