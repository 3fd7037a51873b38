from astro_assistant.providers.base import BaseProvider, GatewayError
from astro_assistant.providers.gateway import AIGatewayProvider

__all__ = ["AIGatewayProvider", "BaseProvider", "GatewayError"]
