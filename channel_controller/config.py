from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # ==========================================================================
    # Dispatcher Monitoring
    # ==========================================================================
    # Image for the kube-rbac-proxy sidecar that fronts the dispatcher metrics
    # endpoint with TLS. Set at deployment time (e.g. by the operator bundle).
    # No default image: an empty value is passed through to the sidecar.
    image_kube_rbac_proxy: str = ""

    # ==========================================================================
    # Controller Environment
    # ==========================================================================
    # Namespace the controller itself runs in, handed down to the dispatcher
    system_namespace: str = "knative-eventing"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields from .env file
        case_sensitive = False  # Allow lowercase env vars to match uppercase field names

@lru_cache()
def get_settings():
    return Settings()
