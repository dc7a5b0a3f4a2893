# Package exports - these allow cleaner imports like:
# from catalog_manager.auth import get_current_user, credential_service
from catalog_manager.auth.credentials import credential_service, CredentialService
from catalog_manager.auth.dependencies import get_current_user
