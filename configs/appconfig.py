# Application Configuration
# Centralized configuration for ports, output paths and analysis defaults
from pathlib import Path

class AppConfig:
    """Centralized application configuration"""

    USER_DIR = Path(__file__).parent.parent / "user"
    # Port Configuration
    BACKEND_PORT = 8021

    # API Configuration
    API_PREFIX = "/analysis"

    # Kinematics
    N_STEPS = 24              # samples per motion cycle
    INPUT_SPEED_RPM = 10.0    # crank speed, one cycle lasts 60 / rpm seconds

    # Center of mass placeholder joint.
    # The tracer point must not sit exactly on the line through its parent
    # joints, so it is shifted by this amount on both axes.
    COM_PLACEHOLDER_OFFSET = 1e-5

    # Presentation
    CHART_DECIMALS = 3

    @classmethod
    def cycle_period(cls, input_speed_rpm: float | None = None) -> float:
        rpm = input_speed_rpm if input_speed_rpm is not None else cls.INPUT_SPEED_RPM
        return 60.0 / rpm

# For backward compatibility and easy imports
BACKEND_PORT = AppConfig.BACKEND_PORT
USER_DIR = AppConfig.USER_DIR
N_STEPS = AppConfig.N_STEPS
INPUT_SPEED_RPM = AppConfig.INPUT_SPEED_RPM
COM_PLACEHOLDER_OFFSET = AppConfig.COM_PLACEHOLDER_OFFSET
CHART_DECIMALS = AppConfig.CHART_DECIMALS
