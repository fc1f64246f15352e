"""Secret store – value objects and client ports."""
from secret_config.store.models import Secret, SecretProperties
from secret_config.store.port import AccessToken, CredentialProvider, SecretStoreClient

__all__ = ["AccessToken", "CredentialProvider", "Secret", "SecretProperties", "SecretStoreClient"]
