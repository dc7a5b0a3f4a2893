# Package exports - these allow cleaner imports like:
# from catalog_manager.services.image_providers import ImageProvider, LocalImageProvider
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.services.image_providers.local_provider import LocalImageProvider
from catalog_manager.services.image_providers.cloudinary_provider import CloudinaryImageProvider
