"""ClientConfig — naming and routing settings exposed by a driver."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ClientConfig(BaseModel):
    """Routing configuration a driver reports through ``get_config()``.

    Build it in code or from a mapping::

        config = ClientConfig(prefix="acme", app_name="billing")
        config = ClientConfig.model_validate(settings["producer"])
    """

    model_config = ConfigDict(frozen=True)

    prefix: str = ""
    app_name: str = ""
    router_topic_name: str = "router"
    router_queue_name: str = "default"
    default_processor_queue_name: str = "default"
    router_processor_name: str = "router"

    def create_transport_router_topic_name(self, name: str) -> str:
        """Broker-level name of a router topic, e.g. ``acme.router``."""
        return self._join(self.prefix, name)

    def create_transport_queue_name(self, name: str, *, prefixed: bool = True) -> str:
        """Broker-level queue name, e.g. ``acme.billing.default``."""
        if not prefixed:
            return name.lower()
        return self._join(self.prefix, self.app_name, name)

    @property
    def transport_router_topic_name(self) -> str:
        return self.create_transport_router_topic_name(self.router_topic_name)

    @property
    def transport_router_queue_name(self) -> str:
        return self.create_transport_queue_name(self.router_queue_name)

    @staticmethod
    def _join(*parts: str) -> str:
        return ".".join(p.strip() for p in parts if p and p.strip()).lower()
