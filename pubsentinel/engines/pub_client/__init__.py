"""pub.dev registry client."""

from pubsentinel.engines.pub_client.client import PubDevClient

__all__ = ["PubDevClient"]
