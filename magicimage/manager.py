"""
Inspection Manager — orchestrates reading, analysis, extraction and reporting.
"""

import os
import csv
import json
import time
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Callable

from .analyzer import AnalysisReport, analyze, human_size
from .errors import MagicImageError
from .extractor import ExtractedImage, extract_first, extract_hidden, save_extracted
from .probe import ProbeResult, probe_report
from .reader import MAX_FILE_SIZE, read_image_file
from .scanner import MIN_GAP

logger = logging.getLogger(__name__)


@dataclass
class InspectionSession:
    """Represents one inspection of one container file."""
    session_id: str
    path: str
    start_time: float = 0.0
    end_time: float = 0.0
    report: Optional[AnalysisReport] = None
    first_image: Optional[ExtractedImage] = None
    hidden_image: Optional[ExtractedImage] = None
    probes: list[ProbeResult] = field(default_factory=list)
    saved_paths: list[str] = field(default_factory=list)
    error: str = ""

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def succeeded(self) -> bool:
        return not self.error and self.report is not None

    @property
    def has_hidden_image(self) -> bool:
        return self.hidden_image is not None

    @property
    def summary(self) -> dict:
        s = {
            "path": self.path,
            "succeeded": self.succeeded,
            "error": self.error,
            "has_hidden_image": self.has_hidden_image,
        }
        if self.report is not None:
            s.update(self.report.summary)
        return s


class InspectionManager:
    """High-level manager for magic image inspection."""

    def __init__(self, min_gap: int = MIN_GAP, max_size: int = MAX_FILE_SIZE):
        self.min_gap = min_gap
        self.max_size = max_size
        self.current_session: Optional[InspectionSession] = None
        self._thread: Optional[threading.Thread] = None
        self._on_progress: Optional[Callable] = None
        self._on_complete: Optional[Callable] = None

    def set_callbacks(self, on_progress=None, on_complete=None):
        self._on_progress = on_progress
        self._on_complete = on_complete

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ─── Inspection ──────────────────────────────────────────

    def inspect(
        self,
        path: str,
        output_dir: str = "",
        probe: bool = True,
    ) -> InspectionSession:
        """
        Read, analyze and extract `path` synchronously.

        Failures are logged and recorded on the session, never raised.
        With `output_dir`, the extracted images are saved there.
        """
        session = InspectionSession(
            session_id=f"inspect_{int(time.time())}",
            path=path,
            start_time=time.time(),
        )
        self.current_session = session

        try:
            self._notify(f"Reading {os.path.basename(path)}")
            data = read_image_file(path, max_size=self.max_size)

            self._notify("Analyzing structure")
            session.report = analyze(data, min_gap=self.min_gap)

            if session.report.regions:
                self._notify("Extracting images")
                session.first_image = extract_first(data, min_gap=self.min_gap)
                session.hidden_image = extract_hidden(data, min_gap=self.min_gap)
                if probe:
                    session.probes = [p for _r, p in probe_report(data, session.report)]

            if output_dir:
                self._save_images(session, output_dir)

            self._notify("Done")
        except (MagicImageError, OSError) as e:
            logger.error("Inspection of %s failed: %s", path, e, exc_info=True)
            session.error = str(e)
            self._notify(f"Error: {e}")

        session.end_time = time.time()
        return session

    def start_inspection(self, path: str, output_dir: str = "", probe: bool = True):
        """Run inspect() on a background thread; on_complete gets the session."""
        if self.is_running:
            return
        self._thread = threading.Thread(
            target=self._run,
            args=(path, output_dir, probe),
            daemon=True,
        )
        self._thread.start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the background inspection ends; False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self, path, output_dir, probe):
        session = self.inspect(path, output_dir=output_dir, probe=probe)
        if self._on_complete:
            self._on_complete(session)

    def _notify(self, message: str):
        if self._on_progress:
            self._on_progress(message)

    def _save_images(self, session: InspectionSession, output_dir: str):
        stem = os.path.splitext(os.path.basename(session.path))[0]
        for label, image in (("first", session.first_image), ("hidden", session.hidden_image)):
            if image is None:
                continue
            out = os.path.join(output_dir, f"{stem}_{label}{image.extension}")
            session.saved_paths.append(save_extracted(image, out))

    # ─── Reports ─────────────────────────────────────────────

    def export_report_json(self, filepath: str):
        if not self.current_session:
            return
        s = self.current_session
        report = {
            "session_id": s.session_id,
            "file": s.path,
            "date": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(s.start_time)),
            "duration_s": round(s.duration, 3),
            "min_gap": self.min_gap,
            "summary": s.summary,
            "regions": [
                dict(
                    r.as_dict(),
                    size_human=r.size_human,
                    dimensions=s.probes[i].dimensions if i < len(s.probes) else None,
                )
                for i, r in enumerate(s.report.regions if s.report else ())
            ],
            "saved": s.saved_paths,
        }
        with open(filepath, "w") as f:
            json.dump(report, f, indent=2, default=str)

    def export_report_csv(self, filepath: str):
        if not self.current_session or self.current_session.report is None:
            return
        s = self.current_session
        with open(filepath, "w", newline="") as f:
            w = csv.writer(f)
            w.writerow([
                "#", "Format", "MIME", "Start", "End",
                "Size", "Size (human)", "Offset (hex)", "Dimensions",
            ])
            for i, r in enumerate(s.report.regions):
                dims = s.probes[i].dimensions if i < len(s.probes) else ""
                w.writerow([
                    r.index, r.format_name, r.mime_type, r.start, r.end,
                    r.size, human_size(r.size), r.offset_hex, dims,
                ])
