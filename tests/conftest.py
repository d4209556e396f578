"""Shared test fixtures for codesift."""

from pathlib import Path

import pytest

SHIP_CS = """\
using UnityEngine;
using System.Collections.Generic;

namespace Game.Ships
{
    public class Ship : MonoBehaviour
    {
        public int health;
        public string Name { get; set; }
        public void TakeDamage(int amount)
        {
            health -= amount;
        }
    }
}
"""

WEAPON_CS = """\
using UnityEngine;

public class WeaponData : ScriptableObject
{
    public float damage;
    public void Fire() {}
    public void Fire(int burst) {}
}
"""

MOVER_JS = """\
// legacy mover script
function Update() {
    transform.Translate(0, 0, speed);
}
"""


@pytest.fixture
def unity_project(tmp_path: Path) -> Path:
    """Create a temporary Unity-style project with an Assets/ tree."""
    scripts = tmp_path / "Assets" / "Scripts"
    scripts.mkdir(parents=True)
    (scripts / "Ship.cs").write_text(SHIP_CS, encoding="utf-8")
    (scripts / "WeaponData.cs").write_text(WEAPON_CS, encoding="utf-8")
    (tmp_path / "Assets" / "Mover.js").write_text(MOVER_JS, encoding="utf-8")
    (tmp_path / "Assets" / "README.md").write_text("# not code\n", encoding="utf-8")
    return tmp_path
