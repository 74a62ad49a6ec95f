from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

SampleArray: TypeAlias = NDArray[np.float64]


class Effect(str, Enum):
    faster = "faster"
    slower = "slower"
    echo = "echo"
    reverse = "reverse"
    louder = "louder"
    quieter = "quieter"
    mix = "mix"


@dataclass
class EchoSettings:
    delay: int = 10000
    intensity: float = 0.8


@dataclass
class GainSettings:
    louder: float = 1.2
    quieter: float = 0.8
