"""Engine invocation and join orchestration.

Module organization:
- types.py: Data classes (EngineResult, AttemptPlan, TranscodeResult)
- command.py: FFmpeg command construction
- runner.py: Blocking ffmpeg subprocess runner
- orchestrator.py: TranscodeOrchestrator with hardware fallback
"""

from clipchain.executor.command import build_ffmpeg_command, build_input_args
from clipchain.executor.orchestrator import TranscodeOrchestrator
from clipchain.executor.runner import EngineRunner, FFmpegRunner
from clipchain.executor.types import (
    AttemptPlan,
    EngineResult,
    OrchestratorState,
    TranscodeResult,
)

__all__ = [
    "AttemptPlan",
    "EngineResult",
    "EngineRunner",
    "FFmpegRunner",
    "OrchestratorState",
    "TranscodeOrchestrator",
    "TranscodeResult",
    "build_ffmpeg_command",
    "build_input_args",
]
