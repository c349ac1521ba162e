"""
Landmark view-model.

Holds two observable state cells, one for the landmark list and one for
create/update/delete operations, and drives the repository. After every
successful mutation the whole list is reloaded from the server.

List state:      ListLoading -> ListSuccess | ListError
Mutation state:  CrudIdle -> CrudLoading -> CrudSuccess | CrudError -> CrudIdle
"""

import asyncio
import contextlib
import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple, Union

from app.core.exceptions import OperationInProgressError
from app.core.result import Failure, Result, Success, unknown_variant
from app.core.state import StateCell
from app.models.landmark import Landmark, MapPin
from app.services.landmark_repository import LandmarkRepository
from app.services.map_pins import to_map_pins

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListLoading:
    pass


@dataclass(frozen=True)
class ListSuccess:
    landmarks: Tuple[Landmark, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ListError:
    message: str


LandmarkUiState = Union[ListLoading, ListSuccess, ListError]


@dataclass(frozen=True)
class CrudIdle:
    pass


@dataclass(frozen=True)
class CrudLoading:
    pass


@dataclass(frozen=True)
class CrudSuccess:
    message: str


@dataclass(frozen=True)
class CrudError:
    message: str


CrudOperationState = Union[CrudIdle, CrudLoading, CrudSuccess, CrudError]


class LandmarkViewModel:
    """
    State holder between the repository and a front end.

    Constructing inside a running event loop schedules the initial list load;
    ``await start()`` (or ``await LandmarkViewModel.create()``) waits for it, and
    runs it when the view-model was built outside a loop.
    """

    def __init__(self, repository: Optional[LandmarkRepository] = None):
        self.repository = repository or LandmarkRepository()
        self.ui_state: StateCell[LandmarkUiState] = StateCell(ListLoading())
        self.crud_operation_state: StateCell[CrudOperationState] = StateCell(CrudIdle())
        self._load_sequence = itertools.count(1)
        self._latest_load = 0
        self._initial_load: Optional[asyncio.Task] = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop yet; start() performs the first load
            pass
        else:
            self._initial_load = loop.create_task(self.load_landmarks())

    @classmethod
    async def create(cls, repository: Optional[LandmarkRepository] = None) -> "LandmarkViewModel":
        view_model = cls(repository)
        await view_model.start()
        return view_model

    async def start(self) -> None:
        """Wait for the initial load, running it now if construction could not schedule it."""
        logger.info("Initializing view-model and loading landmarks")
        task, self._initial_load = self._initial_load, None
        if task is not None:
            await task
        else:
            await self.load_landmarks()

    async def aclose(self) -> None:
        task, self._initial_load = self._initial_load, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.repository.aclose()

    @property
    def landmarks(self) -> List[Landmark]:
        state = self.ui_state.value
        if isinstance(state, ListSuccess):
            return list(state.landmarks)
        if isinstance(state, (ListLoading, ListError)):
            return []
        raise unknown_variant(state)

    def map_pins(self) -> List[MapPin]:
        return to_map_pins(self.landmarks)

    async def load_landmarks(self) -> None:
        """
        Reload the list. Only the most recently started load may publish its
        outcome; earlier loads that finish late are discarded.
        """
        sequence = next(self._load_sequence)
        self._latest_load = sequence
        self.ui_state.set(ListLoading())

        result = await self.repository.get_landmarks()

        if sequence != self._latest_load:
            logger.info(f"Discarding stale landmark load #{sequence} (latest is #{self._latest_load})")
            return

        if isinstance(result, Success):
            logger.info(f"Loaded {len(result.value)} landmarks")
            self.ui_state.set(ListSuccess(tuple(result.value)))
        elif isinstance(result, Failure):
            logger.error(f"Failed to load landmarks: {result.message}")
            self.ui_state.set(ListError(result.message or "Unknown error"))
        else:
            raise unknown_variant(result)

    async def create_landmark(
        self,
        title: str,
        latitude: float,
        longitude: float,
        image_path: Optional[Union[str, Path]] = None,
    ) -> bool:
        return await self._run_mutation(
            "create",
            lambda: self.repository.create_landmark(title, latitude, longitude, image_path),
        )

    async def update_landmark(
        self,
        landmark_id: int,
        title: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        image_path: Optional[Union[str, Path]] = None,
    ) -> bool:
        return await self._run_mutation(
            "update",
            lambda: self.repository.update_landmark(landmark_id, title, latitude, longitude, image_path),
        )

    async def delete_landmark(self, landmark_id: int) -> bool:
        return await self._run_mutation("delete", lambda: self.repository.delete_landmark(landmark_id))

    def clear_crud_operation_state(self) -> None:
        """Back to idle once the front end has shown a terminal state."""
        self.crud_operation_state.set(CrudIdle())

    def _begin_mutation(self, verb: str) -> None:
        if isinstance(self.crud_operation_state.value, CrudLoading):
            raise OperationInProgressError(verb)
        self.crud_operation_state.set(CrudLoading())

    async def _run_mutation(self, verb: str, operation: Callable[[], Awaitable[Result]]) -> bool:
        """
        Drive one mutation through Loading to Success/Error.

        Returns False, leaving state untouched, when another mutation is
        still loading.
        """
        try:
            self._begin_mutation(verb)
        except OperationInProgressError as e:
            logger.warning(e.message)
            return False

        logger.info(f"Starting landmark {verb}")
        try:
            result = await operation()
        except Exception as e:
            logger.exception(f"Unexpected error during landmark {verb}")
            self.crud_operation_state.set(CrudError(str(e) or f"Failed to {verb} landmark"))
            return True

        if isinstance(result, Success):
            message = result.value.message_or(f"Landmark {verb}d successfully")
            self.crud_operation_state.set(CrudSuccess(message))
            await self.load_landmarks()
        elif isinstance(result, Failure):
            self.crud_operation_state.set(CrudError(result.message or f"Failed to {verb} landmark"))
        else:
            raise unknown_variant(result)
        return True
