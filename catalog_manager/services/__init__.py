from catalog_manager.config import settings

# Initialize the configured image provider lazily
_image_provider = None


def get_image_provider():
    """Get the configured image provider instance"""
    global _image_provider
    if _image_provider is None:
        if settings.image_provider == "cloudinary":
            from catalog_manager.services.image_providers.cloudinary_provider import CloudinaryImageProvider
            _image_provider = CloudinaryImageProvider()
        else:
            from catalog_manager.services.image_providers.local_provider import LocalImageProvider
            _image_provider = LocalImageProvider()
    return _image_provider
