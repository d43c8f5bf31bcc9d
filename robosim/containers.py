from dependency_injector import containers, providers

from robosim.config import Config
from robosim.core.session_store import InMemoryStateStore
from robosim.service import SimulationService
from robosim.utils.delay import ComputeDelay
from robosim.utils.noise import NoiseSource


class ApplicationContainer(containers.DeclarativeContainer):
    config_path = providers.Dependency()

    config = providers.Singleton(Config, config_file=config_path)

    noise = providers.Singleton(NoiseSource, seed=config.provided.random_seed)

    # delays draw from their own stream so seeded runs stay reproducible
    delay = providers.Singleton(
        ComputeDelay,
        noise=providers.Factory(NoiseSource),
        scale=config.provided.simulated_delay_scale,
    )

    state_store = providers.Singleton(
        InMemoryStateStore,
        ttl_seconds=config.provided.session_ttl_seconds,
        cleanup_interval=config.provided.session_cleanup_interval_seconds,
        max_runs=config.provided.max_runs_per_session,
    )

    service = providers.Singleton(
        SimulationService,
        config=config,
        store=state_store,
        noise=noise,
        delay=delay,
    )
