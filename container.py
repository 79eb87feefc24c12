"""
Service Container for T-Shirt Showdown.

Every service is a process-wide singleton built on first use from its
registered factory, with its named dependencies passed positionally.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple


class CircularDependencyError(Exception):
    """Raised when services depend on each other in a loop"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceContainer:
    """Lazily builds and caches the application's services."""

    def __init__(self):
        self._factories: Dict[str, Tuple[Callable, List[str]]] = {}
        self._instances: Dict[str, Any] = {}
        self._resolving: List[str] = []

    def register(self, name: str, factory: Callable, dependencies: List[str] = None) -> 'ServiceContainer':
        if name in self._factories or name in self._instances:
            raise ValueError(f"Service '{name}' is already registered")
        self._factories[name] = (factory, list(dependencies or []))
        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide an object built outside the container, such as the SocketIO instance."""
        self._instances[name] = instance
        return self

    def get(self, name: str) -> Any:
        """
        Return the service instance, building it and its dependencies on first use.

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If the dependency graph loops back on itself
        """
        if name in self._instances:
            return self._instances[name]
        if name not in self._factories:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")
        if name in self._resolving:
            cycle = ' -> '.join(self._resolving + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        factory, dependencies = self._factories[name]
        self._resolving.append(name)
        try:
            instance = factory(*[self.get(dep) for dep in dependencies])
        finally:
            self._resolving.pop()

        self._instances[name] = instance
        return instance

    def missing_dependencies(self) -> Dict[str, List[str]]:
        """Map each service to the dependencies nothing provides."""
        known = set(self._factories) | set(self._instances)
        return {
            name: [dep for dep in deps if dep not in known]
            for name, (_, deps) in self._factories.items()
            if any(dep not in known for dep in deps)
        }

    def service_names(self) -> List[str]:
        return list(self._factories)

    def configure_services(self) -> 'ServiceContainer':
        """Register the room and session services."""
        from src.room_registry import RoomRegistry
        from src.services.room_code_generator import RoomCodeGenerator
        from src.services.player_directory import PlayerDirectory
        from src.services.validation_service import ValidationService
        from src.services.room_state_presenter import RoomStatePresenter
        from src.services.broadcast_service import BroadcastService
        from src.services.phase_scheduler import PhaseScheduler

        self.register('RoomCodeGenerator', RoomCodeGenerator)
        self.register('PlayerDirectory', PlayerDirectory)
        self.register('ValidationService', ValidationService)
        self.register('RoomStatePresenter', RoomStatePresenter)

        self.register('RoomRegistry', RoomRegistry, dependencies=['RoomCodeGenerator', 'PlayerDirectory'])
        self.register('BroadcastService', BroadcastService, dependencies=['socketio', 'RoomStatePresenter'])
        # socketio doubles as the scheduler's background task runner
        self.register('PhaseScheduler', PhaseScheduler,
                      dependencies=['BroadcastService', 'RoomRegistry', 'socketio'])
        return self


_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def configure_container(socketio) -> ServiceContainer:
    """Build a fresh global container around the SocketIO instance."""
    global _app_container
    _app_container = ServiceContainer()
    _app_container.set_external_dependency('socketio', socketio)
    return _app_container.configure_services()
