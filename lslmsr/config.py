from typing_extensions import TypedDict
import logging
import os
from dotenv import dotenv_values, find_dotenv

# Hard ceiling on simulator steps; bounds worst-case quote computation.
MAX_STEPS = 64

ENV_PREFIX = 'LSLMSR_'
OPTIONAL_VARS = ['DEFAULT_STEPS', 'MAX_STEPS', 'SLIPPAGE_PCT', 'LOG_LEVEL', 'AMM_ACCOUNT']


def load_env(dotenv_path: str | None = None) -> dict[str, str]:
    # .env file (for local development) is read without touching os.environ;
    # real environment variables win over it
    file_values = dotenv_values(dotenv_path or find_dotenv(usecwd=True))

    env_vars = {}
    for key in OPTIONAL_VARS:
        value = os.getenv(ENV_PREFIX + key, file_values.get(ENV_PREFIX + key))
        if value is not None:
            env_vars[key] = value
    return env_vars


class EngineParams(TypedDict):
    max_steps: int
    default_steps: int
    slippage_pct: float
    log_level: str
    amm_account: str


def get_default_engine_params() -> EngineParams:
    return EngineParams(
        max_steps=MAX_STEPS,
        default_steps=16,
        slippage_pct=0.5,
        log_level='INFO',
        amm_account='amm',
    )


def validate_engine_params(params: EngineParams) -> None:
    if not (1 <= params['max_steps'] <= MAX_STEPS):
        raise ValueError(f"max_steps must be in [1, {MAX_STEPS}]")
    if not (1 <= params['default_steps'] <= params['max_steps']):
        raise ValueError("default_steps must be in [1, max_steps]")
    if not (0 <= params['slippage_pct'] < 100):
        raise ValueError("slippage_pct must be in [0,100)")
    if params['log_level'].upper() not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log_level: {params['log_level']}")
    if not params['amm_account']:
        raise ValueError("amm_account must be non-empty")


def get_engine_params() -> EngineParams:
    """Defaults overridden by LSLMSR_* environment variables (or .env)."""
    params = get_default_engine_params()
    env = load_env()
    if 'DEFAULT_STEPS' in env:
        params['default_steps'] = int(env['DEFAULT_STEPS'])
    if 'MAX_STEPS' in env:
        params['max_steps'] = int(env['MAX_STEPS'])
    if 'SLIPPAGE_PCT' in env:
        params['slippage_pct'] = float(env['SLIPPAGE_PCT'])
    if 'LOG_LEVEL' in env:
        params['log_level'] = env['LOG_LEVEL']
    if 'AMM_ACCOUNT' in env:
        params['amm_account'] = env['AMM_ACCOUNT']
    validate_engine_params(params)
    return params


def configure_logging(level: str = 'INFO') -> None:
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
