from dependency_injector import containers, providers

from promptcoin.config import Settings
from promptcoin.services.stripe_gateway import StripeGateway


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ServiceModule(containers.DeclarativeContainer):
    """External collaborator adapters.

    DB 세션은 요청마다 새로 열어야 하므로 컨테이너가 아니라 deps.get_db 로 주입합니다.
    """

    config = providers.DependenciesContainer()

    stripe_gateway = providers.Singleton(StripeGateway, settings=config.config)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "promptcoin.deps",
        ],
    )

    config = providers.Container(ConfigModule)
    services = providers.Container(ServiceModule, config=config)
