from dataclasses import dataclass


@dataclass(frozen=True)
class CartAddCommand:
    user_id: int
    product_id: int
    count: int = 1

    def __post_init__(self):
        if self.count < 1:
            raise ValueError("count must be at least 1")


@dataclass(frozen=True)
class CartRemoveCommand:
    user_id: int
    product_id: int
