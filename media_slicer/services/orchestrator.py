"""Segmentation run lifecycle and async orchestration."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from ..archive.builder import ArchiveBuilder
from ..config import MAX_SEGMENT_SECONDS, MIN_SEGMENT_SECONDS, Settings, settings as default_settings
from ..engine.base import MediaEngine
from ..engine.session import EngineSession
from ..errors import (
    CleanupError,
    MediaSlicerError,
    NoSegmentsProduced,
    RunInProgress,
    SegmentationFailed,
    ValidationError,
    describe_error,
)
from ..models.media import OutputEntry, SegmentSpec, SourceFile
from ..models.run import ProcessingRun, RunError, RunPhase
from ..utils.filenames import base_name_of, sanitize
from ..utils.media_types import extension_of, validate_selection
from .delivery import Delivery
from .segmenting import (
    MAX_SORTABLE_SEGMENTS,
    archive_entry_name,
    archive_name,
    build_segment_command,
    engine_input_name,
    is_output_name,
    resolve_output_extension,
    select_outputs,
)

logger = logging.getLogger(__name__)

RunListener = Callable[[ProcessingRun], Awaitable[None]]


class SegmentationOrchestrator:
    """Drives one media file through the engine and into a ZIP archive.

    Phases run strictly in order: loading, writing, segmenting, collecting,
    archiving, finalizing, then succeeded. Any error moves the run to failed
    after a best-effort cleanup of the engine's working files. ``_run`` is
    the only state; observers get copies through listeners or ``run``.
    """

    def __init__(
        self,
        session: EngineSession,
        delivery: Delivery,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.delivery = delivery
        self.settings = settings or default_settings
        self._run = ProcessingRun()
        self._selection: Optional[SourceFile] = None
        self._run_source: Optional[SourceFile] = None
        self._task: Optional[asyncio.Task] = None
        self._reset_task: Optional[asyncio.Task] = None
        self._listeners: list[RunListener] = []

    @property
    def run(self) -> ProcessingRun:
        return self._run.model_copy(deep=True)

    @property
    def busy(self) -> bool:
        return self._run.phase.is_active

    @property
    def selection(self) -> Optional[SourceFile]:
        return self._selection

    def add_listener(self, callback: RunListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: RunListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # -- selection -------------------------------------------------------

    def select_file(self, source: SourceFile) -> SourceFile:
        if self.busy:
            raise RunInProgress()
        validate_selection(source.name, source.mime_type, source.size, self.settings.max_upload_bytes)
        if self._selection is not None and self._selection is not source:
            self._selection.discard()
        self._selection = source
        logger.info(f"Selected {source.name!r} ({source.size} bytes)")
        return source

    def clear_selection(self) -> None:
        if self.busy:
            raise RunInProgress()
        if self._selection is not None:
            self._selection.discard()
            self._selection = None

    # -- run trigger -----------------------------------------------------

    def start_run(
        self,
        source: Optional[SourceFile],
        segment_length_seconds: int,
    ) -> ProcessingRun:
        """Validate preconditions, then drive the run in the background.

        Raises ValidationError without touching any state or the engine when
        a precondition fails. Must be called from the running event loop.
        """
        self._check_preconditions(source, segment_length_seconds)

        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None

        self._run = ProcessingRun(
            phase=RunPhase.LOADING,
            status="Processing... This may take a while for large files.",
            source_name=source.name,
            segment_length_seconds=segment_length_seconds,
        )
        self._run_source = source
        self._task = asyncio.create_task(self._execute(source, segment_length_seconds))
        logger.info(f"Run {self._run.id} started for {source.name!r} ({segment_length_seconds}s segments)")
        return self.run

    def _check_preconditions(self, source: Optional[SourceFile], segment_length_seconds: int) -> None:
        if self.busy:
            raise RunInProgress()
        if source is None:
            raise ValidationError("Please select a file to process.", field="file")
        validate_selection(source.name, source.mime_type, source.size, self.settings.max_upload_bytes)
        if not self.session.loaded:
            raise ValidationError(
                "The media engine is not loaded yet. Please wait for it to load.",
                field="engine",
            )
        if not isinstance(segment_length_seconds, int) or isinstance(segment_length_seconds, bool):
            raise ValidationError("Segment length must be a whole number of seconds.", field="segment_length")
        if segment_length_seconds < MIN_SEGMENT_SECONDS:
            raise ValidationError("Segment length must be greater than 0.", field="segment_length")
        if segment_length_seconds > MAX_SEGMENT_SECONDS:
            raise ValidationError(
                f"Segment length must be at most {MAX_SEGMENT_SECONDS} seconds.",
                field="segment_length",
            )

    async def join(self) -> None:
        """Wait until the current run (if any) has settled."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def shutdown(self) -> None:
        if self._reset_task is not None:
            self._reset_task.cancel()
        if self._task is not None and not self._task.done():
            logger.warning(f"Shutting down during run {self._run.id}")
            self._task.cancel()

    # -- state machine ---------------------------------------------------

    async def _execute(self, source: SourceFile, segment_length_seconds: int) -> None:
        sanitized = sanitize(source.name)
        base_name = base_name_of(sanitized)
        input_name = engine_input_name(sanitized)
        spec = SegmentSpec(
            segment_length_seconds=segment_length_seconds,
            output_extension=resolve_output_extension(extension_of(sanitized)),
        )
        ext = spec.output_extension

        try:
            await self._transition(RunPhase.LOADING, 0, "Loading file into memory...")
            engine = await self.session.acquire()
            data = await source.read_bytes()

            await self._transition(RunPhase.WRITING, status="Loading file into the media engine...")
            await engine.write_file(input_name, data)
            del data

            await self._transition(RunPhase.SEGMENTING, 10, "Slicing media file...")
            await self._segment(engine, input_name, spec)

            await self._transition(RunPhase.COLLECTING, 60, "Collecting segments...")
            outputs = select_outputs(await engine.list_dir("/"), ext, input_name)
            if not outputs:
                raise NoSegmentsProduced(
                    "No output files were created. The file might be too short or there was an error."
                )
            if len(outputs) > MAX_SORTABLE_SEGMENTS:
                logger.warning(
                    f"{len(outputs)} segments exceed the {MAX_SORTABLE_SEGMENTS} the two-digit "
                    "counter sorts correctly; archive order may not match playback order"
                )

            total = len(outputs)
            self._run.segment_count = total
            await self._transition(RunPhase.ARCHIVING, 70, f"Creating ZIP file with {total} segments...")
            archive = ArchiveBuilder()
            for ordinal, name in enumerate(outputs, start=1):
                entry = OutputEntry(
                    name=name,
                    ordinal=ordinal,
                    archive_name=archive_entry_name(base_name, ordinal, ext),
                    data=await engine.read_file(name),
                )
                archive.add(entry.archive_name, entry.data)
                await self._transition(RunPhase.ARCHIVING, 70 + ordinal / total * 20)

            await self._transition(RunPhase.FINALIZING, 95, "Finalizing ZIP file...")
            blob = await archive.finalize()
            zip_name = archive_name(base_name)
            self._run.archive_name = zip_name
            await self._deliver(blob, zip_name)
            await self._delete_quietly(engine, [*outputs, input_name])

        except Exception as e:
            await self._fail(e, input_name)
            return

        self._run.completed_at = datetime.now(tz=timezone.utc)
        await self._transition(
            RunPhase.SUCCEEDED,
            100,
            f"Success! Created {total} segments. Download started.",
        )
        self._schedule_reset()

    async def _segment(self, engine: MediaEngine, input_name: str, spec: SegmentSpec) -> None:
        argv = build_segment_command(input_name, spec)
        try:
            await engine.exec(argv)
        except Exception as e:
            raise SegmentationFailed("Media processing failed", describe_error(e)) from e

    async def _deliver(self, blob: bytes, filename: str) -> None:
        """Fire-and-forget: a delivery error is logged and the run still succeeds."""
        try:
            await self.delivery.deliver(self._run.id, blob, filename)
        except Exception:
            logger.exception(f"Run {self._run.id}: delivery of {filename} failed")

    async def _fail(self, exc: Exception, input_name: str) -> None:
        run = self._run
        if isinstance(exc, MediaSlicerError):
            logger.error(f"Run {run.id} failed in {run.phase.value}: {exc}")
        else:
            logger.exception(f"Run {run.id} failed in {run.phase.value}")

        if self.session.loaded:
            await self._discard_residue(self.session.engine, input_name)

        run.error = RunError(
            kind=type(exc).__name__,
            message=f"Error processing file: {describe_error(exc)}",
        )
        run.completed_at = datetime.now(tz=timezone.utc)
        await self._transition(RunPhase.FAILED, status="")
        self._schedule_reset()

    async def _transition(
        self,
        phase: RunPhase,
        progress: Optional[float] = None,
        status: Optional[str] = None,
    ) -> None:
        run = self._run
        if phase != run.phase:
            logger.info(f"Run {run.id}: {run.phase.value} -> {phase.value}")
        run.phase = phase
        if progress is not None:
            # never moves backwards within a run
            run.progress = max(run.progress, min(100.0, float(progress)))
        if status is not None:
            run.status = status
        await self._notify()

    # -- cleanup ---------------------------------------------------------

    async def _discard_residue(self, engine: MediaEngine, input_name: str) -> None:
        """Remove the input and every segment-looking entry after a failure.

        Errors here are logged and dropped on purpose: they must never
        replace the error that failed the run.
        """
        try:
            entries = await engine.list_dir("/")
        except Exception as e:
            self._log_cleanup_error(CleanupError("Could not list engine files", details=describe_error(e)))
            return
        names = [e.name for e in entries if e.name == input_name or is_output_name(e.name)]
        await self._delete_quietly(engine, names)

    async def _delete_quietly(self, engine: MediaEngine, names: list[str]) -> None:
        for name in names:
            try:
                await engine.delete_file(name)
            except Exception as e:
                self._log_cleanup_error(CleanupError("Could not delete engine file", name, describe_error(e)))

    def _log_cleanup_error(self, err: CleanupError) -> None:
        logger.warning(f"Cleanup error (ignored): {err}")

    # -- observation -----------------------------------------------------

    async def _notify(self) -> None:
        snapshot = self.run
        for cb in list(self._listeners):
            try:
                await cb(snapshot)
            except Exception:
                logger.warning("Progress listener failed", exc_info=True)

    def _schedule_reset(self) -> None:
        self._reset_task = asyncio.create_task(self._reset_after_delay(self._run))

    async def _reset_after_delay(self, run: ProcessingRun) -> None:
        await asyncio.sleep(self.settings.reset_delay_seconds)
        if self._run is not run or not run.phase.is_terminal:
            return
        if run.phase == RunPhase.SUCCEEDED and self._selection is self._run_source:
            self.clear_selection()
        self._run_source = None
        # a failed run keeps its error visible until the next attempt
        run.phase = RunPhase.IDLE
        run.progress = 0.0
        run.status = ""
        self._reset_task = None
        await self._notify()
