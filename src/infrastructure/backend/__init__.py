from infrastructure.backend.http_backend import HttpProvisioningBackend

__all__ = ["HttpProvisioningBackend"]
