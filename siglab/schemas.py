from typing import Literal

from pydantic import BaseModel, Field

from .config import DEFAULT_ALGORITHM, DEFAULT_KEY_BITS, DEFAULT_SCENARIO_MESSAGE
from .models import Algorithm, ScenarioConfig


class ScenarioRequest(BaseModel):
    message: str = Field(default=DEFAULT_SCENARIO_MESSAGE, max_length=10000)
    algorithm: Algorithm = Algorithm.parse(DEFAULT_ALGORITHM)
    key_bits: Literal[2048, 3072, 4096] = DEFAULT_KEY_BITS
    tamper_message: bool = False
    swap_key: bool = False
    corrupt_signature: bool = False

    def to_config(self) -> ScenarioConfig:
        return ScenarioConfig.from_flags(
            message=self.message,
            algorithm=self.algorithm,
            key_bits=self.key_bits,
            tamper_message=self.tamper_message,
            swap_key=self.swap_key,
            corrupt_signature=self.corrupt_signature,
        )
