"""Data models for external tool capabilities."""

from dataclasses import dataclass, field


@dataclass
class FFmpegCapabilities:
    """Advertised capabilities of an ffmpeg build.

    Each set is the opaque list of names ffmpeg prints for -hwaccels,
    -encoders and -decoders (lowercased).
    """

    hwaccels: set[str] = field(default_factory=set)
    encoders: set[str] = field(default_factory=set)
    decoders: set[str] = field(default_factory=set)

    def has_hwaccel(self, name: str) -> bool:
        """Check if a hardware acceleration method is advertised."""
        return name.casefold() in self.hwaccels

    def has_encoder(self, name: str) -> bool:
        """Check if encoder is available."""
        return name.casefold() in self.encoders


@dataclass(frozen=True)
class CapabilitySnapshot:
    """Hardware acceleration support detected once per run.

    This dataclass is immutable; the only change of hardware usage during a
    run is the orchestrator's deliberate fallback, which builds new plans
    instead of mutating the snapshot.
    """

    has_cuda_hwaccel: bool = False
    has_nvenc_encoder: bool = False
    has_cuvid_decoder: bool = False
    driver_present: bool = False

    decoders: frozenset[str] = frozenset()
    """Decoder names advertised by ffmpeg, used for per-input selectors."""

    @property
    def use_hardware(self) -> bool:
        """True if the hardware decode/encode path should be attempted."""
        return (
            self.has_cuda_hwaccel
            and self.has_nvenc_encoder
            and self.has_cuvid_decoder
            and self.driver_present
        )

    def to_dict(self) -> dict[str, bool]:
        """Return the capability flags as a dict for display."""
        return {
            "has_cuda_hwaccel": self.has_cuda_hwaccel,
            "has_nvenc_encoder": self.has_nvenc_encoder,
            "has_cuvid_decoder": self.has_cuvid_decoder,
            "driver_present": self.driver_present,
            "use_hardware": self.use_hardware,
        }

    @classmethod
    def software_only(cls) -> "CapabilitySnapshot":
        """Snapshot with no hardware support."""
        return cls()
