from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Database (named scenario store)
    database_url: str = "sqlite:///scenarios.db"

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Template values for a new scenario (currency in MSEK)
    default_initial_share_count: int = 1_000_000
    default_raise_amount: Decimal = Decimal("5")
    default_management_cost: Decimal = Decimal("5")
    default_growth_percent: Decimal = Decimal("20")
    default_projection_years: int = 10

    # IRR solver
    irr_initial_guess: float = 0.1
    irr_tolerance: float = 1e-7
    irr_max_iterations: int = 100
    irr_total_loss_threshold: Decimal = Decimal("0.01")  # Final value / outflow

    # Break-even hurdle: one-year value must reach this multiple of entry value
    break_even_multiple: Decimal = Decimal("3")


settings = Settings()
