"""
Energy Tracker - Per-channel peak metering with overload hold.

Two clocks drive the tracker:
- process() runs once per audio block and accumulates peaks
- tick() runs at a caller-chosen cadence (e.g. display refresh)
  and drives the overload led countdown

Both work in place on arrays sized at construction and never allocate.
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

FLOOR_DB = -90.0


class RampPhase(Enum):
    """Where the tracker stands in its accumulation window."""
    
    COLLECTING = "collecting"
    """Peaks are max-held; `remaining` calls left before the next reset."""
    
    JUST_RESET = "just_reset"
    """The last process() call replaced every peak."""


class EnergyTracker:
    """Peak accumulation and overload latching for N channels.
    
    The window cadence: after set_window(n), the next n process() calls
    max-hold the peaks and the call after them replaces every peak with
    the incoming magnitude. With n = 0 every call replaces the peaks.
    
    Args:
        channels: Number of channels.
        window: Initial window length.
        floor_db: Energy reported for a zero peak.
        overload_threshold: Peak above which the overload hold latches.
    
    Example:
        tracker = EnergyTracker(channels=8, window=16)
        
        # Audio thread
        tracker.process(block_peaks)
        
        # UI thread, once per frame
        tracker.tick(30)  # led stays lit for 30 frames
        if tracker.overloaded(0):
            ...
    """
    
    def __init__(
        self,
        channels: int,
        window: int = 0,
        floor_db: float = FLOOR_DB,
        overload_threshold: float = 1.0,
    ):
        if channels < 1:
            raise ValueError("EnergyTracker needs at least one channel")
        
        self._channels = channels
        self._floor_db = floor_db
        self._threshold = overload_threshold
        
        self._peaks = np.zeros(channels, dtype=np.float64)
        self._holds = np.zeros(channels, dtype=np.int64)
        
        # Scratch buffers for the hot path
        self._magnitudes = np.zeros(channels, dtype=np.float64)
        self._over = np.zeros(channels, dtype=bool)
        self._under = np.zeros(channels, dtype=bool)
        self._counting = np.zeros(channels, dtype=bool)
        
        self._window = 0
        self._remaining = 0
        self._phase = RampPhase.COLLECTING
        self.set_window(window)
    
    @property
    def channels(self) -> int:
        return self._channels
    
    @property
    def window(self) -> int:
        return self._window
    
    @property
    def phase(self) -> RampPhase:
        return self._phase
    
    @property
    def remaining(self) -> int:
        """Max-hold calls left before the next reset."""
        return self._remaining
    
    def set_window(self, window: int) -> None:
        """Set the window length and restart the accumulation window."""
        if window < 0:
            raise ValueError("window must be >= 0")
        self._window = int(window)
        self._remaining = self._window
        self._phase = RampPhase.COLLECTING
    
    def process(self, samples: np.ndarray) -> None:
        """Accumulate one block of per-channel samples.
        
        Args:
            samples: Array of shape (channels,), one value per channel.
        """
        np.abs(samples, out=self._magnitudes)
        
        if self._remaining == 0:
            self._remaining = self._window
            self._phase = RampPhase.JUST_RESET
            np.copyto(self._peaks, self._magnitudes)
        else:
            self._remaining -= 1
            self._phase = RampPhase.COLLECTING
            np.maximum(self._peaks, self._magnitudes, out=self._peaks)
    
    def tick(self, hold_time: int) -> None:
        """Advance the overload leds by one step.
        
        Channels over the threshold latch their hold counter to `hold_time`,
        the others count down by one until they reach zero.
        """
        if hold_time < 0:
            raise ValueError("hold_time must be >= 0")
        
        np.greater(self._peaks, self._threshold, out=self._over)
        np.logical_not(self._over, out=self._under)
        np.greater(self._holds, 0, out=self._counting)
        np.logical_and(self._counting, self._under, out=self._counting)
        
        np.subtract(self._holds, 1, out=self._holds, where=self._counting)
        np.copyto(self._holds, hold_time, where=self._over)
    
    def reset(self) -> None:
        """Clear peaks and holds, and restart the window."""
        self._peaks.fill(0.0)
        self._holds.fill(0)
        self.set_window(self._window)
    
    def peak(self, index: int) -> float:
        return float(self._peaks[index])
    
    def hold(self, index: int) -> int:
        return int(self._holds[index])
    
    def energy_db(self, index: int) -> float:
        """Peak of a channel in dB, or the floor for a zero peak."""
        peak = self._peaks[index]
        if peak > 0.0:
            return 20.0 * math.log10(peak)
        return self._floor_db
    
    def overloaded(self, index: int) -> bool:
        return bool(self._holds[index] != 0)
    
    def energies_db(self) -> np.ndarray:
        """Energy of every channel in dB. Allocates; not for the audio thread."""
        energies = np.full(self._channels, self._floor_db)
        positive = self._peaks > 0.0
        energies[positive] = 20.0 * np.log10(self._peaks[positive])
        return energies
    
    def overload_mask(self) -> np.ndarray:
        """Boolean array of the channels whose led is lit."""
        return self._holds != 0
