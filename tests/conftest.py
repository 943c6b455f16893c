import random

import pytest

from catalog import Champion


@pytest.fixture
def small_catalog():
    return (
        Champion(id="kaisa", name="Kai'Sa", title="Daughter of the Void"),
        Champion(id="ryze", name="Ryze", title="the Rune Mage"),
    )


@pytest.fixture
def catalog():
    return (
        Champion(id="ahri", name="Ahri", title="the Nine-Tailed Fox"),
        Champion(id="drmundo", name="Dr. Mundo", title="the Madman of Zaun"),
        Champion(id="kaisa", name="Kai'Sa", title="Daughter of the Void"),
        Champion(id="monkeyking", name="Wukong", title="the Monkey King"),
        Champion(id="nunu", name="Nunu & Willump", title="the Boy and His Yeti"),
        Champion(id="vi", name="Vi", title="the Piltover Enforcer"),
    )


@pytest.fixture
def rng():
    return random.Random(1234)
