import pytest
import jax
import jax.numpy as jnp
import ace_rotations as ace


class _PRNGKey:
    def __init__(self, key):
        self.key = key

    def __next__(self):
        self.key, key = jax.random.split(self.key)
        return key

    def __getitem__(self, i):
        return jax.random.PRNGKey(i)


@pytest.fixture
def keys():
    return _PRNGKey(jax.random.PRNGKey(24))


@pytest.fixture
def rotations(keys):
    """Sampler of ZYZ Euler angles of Haar random rotations."""

    def sample(shape=(), dtype=jnp.float32):
        u = jax.random.uniform(next(keys), (3,) + shape, dtype=dtype)
        # cos(beta) uniform in [-1, 1]
        return 2 * jnp.pi * u[0], jnp.arccos(1 - 2 * u[1]), 2 * jnp.pi * u[2]

    return sample


@pytest.fixture(autouse=True)
def ace_config():
    from ace_rotations._src.config import __default_conf

    for key, value in __default_conf.items():
        ace.config(key, value)

    jax.config.update("jax_enable_x64", False)
