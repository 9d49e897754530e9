"""Base generator class for all data generators."""

from __future__ import annotations

import random
from abc import ABC
from datetime import datetime

from faker import Faker


class BaseGenerator(ABC):
    """Base class for all data generators.

    Provides common initialization: Faker instance creation,
    seed-based reproducibility and a fixed reference instant.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_IN``).
    as_of : datetime | None
        Instant the synthetic history runs up to; defaults to now.
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_IN",
        as_of: datetime | None = None,
    ) -> None:
        self.fake = Faker(locale)
        self.as_of = as_of or datetime.now()
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)
