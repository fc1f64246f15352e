"""Testing – in-memory fakes for applications and this library's own tests."""
from secret_config.testing.fakes import FakeCredentialProvider, FakeSecretStoreClient

__all__ = ["FakeCredentialProvider", "FakeSecretStoreClient"]
