"""Actors and weapons that can appear as the cause of a player's death, keyed by their log names."""

import enum
from dataclasses import dataclass


class Rarity(enum.Enum):
    COMMON = (0x97, 0x9A, 0x9A)
    UNCOMMON = (0x58, 0xD6, 0x8D)
    RARE = (0x04, 0x95, 0xB4)
    EPIC = (0xB5, 0x84, 0xC8)
    EXOTIC = (0xE7, 0x4C, 0x3C)
    LEGENDARY = (0xFF, 0x80, 0x80)
    RAINBOW = (0xFF, 0xD7, 0x00)

    @property
    def color(self):
        return self.value

    @property
    def hex(self):
        return "#{:02x}{:02x}{:02x}".format(*self.value)


@dataclass(frozen=True)
class Actor:
    name: str
    rarity: Rarity
    log_name: str


@dataclass(frozen=True)
class Weapon:
    name: str
    rarity: Rarity
    log_name: str


ACTORS = {
    actor.log_name.lower(): actor
    for actor in [
        Actor("None", Rarity.COMMON, "None"),
        Actor("Player", Rarity.COMMON, "PRO_PlayerCharacter"),
        Actor("Strider", Rarity.COMMON, "AIChar_Strider_BP"),
        Actor("Rattler", Rarity.UNCOMMON, "AIChar_Rattler_BP"),
        Actor("Crusher", Rarity.EPIC, "AIChar_Crusher_BP"),
        Actor("Weremole", Rarity.RAINBOW, "AIChar_Weremole_BP"),
        Actor("Howler", Rarity.RAINBOW, "AIChar_Howler_BP"),
    ]
}

WEAPONS = {
    weapon.log_name.lower(): weapon
    for weapon in [
        Weapon("None", Rarity.COMMON, "None"),
        Weapon("K_28 (Scrappy)", Rarity.COMMON, "WP_E_Pistol_Bullet_01_scrappy"),
        Weapon("K_28", Rarity.COMMON, "WP_E_Pistol_Bullet_01"),
        Weapon("B9_Trenchgun (Scrappy)", Rarity.COMMON, "WP_E_SGun_Bullet_01_scrappy"),
        Weapon("B9_Trenchgun", Rarity.COMMON, "WP_E_SGun_Bullet_01"),
        Weapon("S_576 (Scrappy)", Rarity.COMMON, "WP_E_SMG_Bullet_01_scrappy"),
        Weapon("S_576", Rarity.COMMON, "WP_E_SMG_Bullet_01"),
        Weapon("S_576", Rarity.UNCOMMON, "WP_E_SMG_Bullet_02"),
        Weapon("AR_55 (Scrappy)", Rarity.COMMON, "WP_E_AR_Energy_01_scrappy"),
        Weapon("AR_55", Rarity.COMMON, "WP_E_AR_Energy_01"),
        Weapon("AR_55", Rarity.UNCOMMON, "WP_E_AR_Energy_02"),
        Weapon("C_32_Bolt", Rarity.COMMON, "WP_E_Sniper_Bullet_01"),
        Weapon("C_32_Bolt", Rarity.UNCOMMON, "WP_E_Sniper_Bullet_02"),
        Weapon("Bulldog", Rarity.UNCOMMON, "WP_D_Pistol_Bullet_01"),
        Weapon("Guarantee", Rarity.UNCOMMON, "WP_D_LMG_Energy_02"),
        Weapon("Guarantee", Rarity.RARE, "WP_D_LMG_Energy_01"),
        Weapon("Lacerator", Rarity.RARE, "WP_D_BR_Shard_01"),
        Weapon("Shattergun", Rarity.EPIC, "WP_D_SGun_Shard_01"),
        Weapon("Advocate", Rarity.EPIC, "WP_D_AR_Bullet_01"),
        Weapon("Voltaic_brute", Rarity.EXOTIC, "WP_D_SMG_Energy_01"),
        Weapon("Kinetic_arbiter", Rarity.EXOTIC, "WP_D_Sniper_Gauss_01"),
        Weapon("Scrapper", Rarity.UNCOMMON, "WP_A_SMG_Shard_01"),
        Weapon("Maelstorm", Rarity.RARE, "WP_A_SGun_Energy_01"),
        Weapon("Longshot", Rarity.RARE, "WP_A_BR_Bullet_02"),
        Weapon("Longshot", Rarity.EPIC, "WP_A_BR_Bullet_01"),
        Weapon("Hammer", Rarity.RARE, "WP_A_Pistol_Bullet_02"),
        Weapon("Hammer", Rarity.EXOTIC, "WP_A_Pistol_Bullet_01"),
        Weapon("KOR", Rarity.EXOTIC, "WP_A_AR_Bullet_01"),
        Weapon("Scarab", Rarity.UNCOMMON, "WP_G_Pistol_Energy_01"),
        Weapon("Scarab", Rarity.RARE, "WP_G_Pistol_Energy_02"),
        Weapon("Manticore", Rarity.UNCOMMON, "WP_G_AR_Needle_01"),
        Weapon("Manticore", Rarity.RARE, "WP_G_AR_Needle_02"),
        Weapon("Phasic Lancer", Rarity.RARE, "WP_G_AR_Energy_01"),
        Weapon("Flechette Gun", Rarity.RARE, "WP_G_SMG_Needle_02"),
        Weapon("Flechette Gun", Rarity.EPIC, "WP_G_SMG_Needle_01"),
        Weapon("Gorgon", Rarity.EPIC, "WP_G_AR_Beam_01"),
        Weapon("Basilisk", Rarity.EXOTIC, "WP_G_Sniper_Energy_01"),
        Weapon("KARMA", Rarity.EPIC, "WP_A_Sniper_Gauss_02"),
        Weapon("KARMA", Rarity.LEGENDARY, "WP_A_Sniper_Gauss_01"),
        Weapon("KOMRAD", Rarity.LEGENDARY, "WP_A_Launch_MSL_01"),
        Weapon("ZEUS", Rarity.EPIC, "WP_G_HVY_Beam_02"),
        Weapon("ZEUS", Rarity.LEGENDARY, "WP_G_HVY_Beam_01"),
        Weapon("Knife", Rarity.RAINBOW, "Melee_Knife_01"),
        Weapon("Shock Grenade", Rarity.COMMON, "ShockGrenade_01"),
        Weapon("Shock Grenade", Rarity.UNCOMMON, "ShockGrenade_02"),
        Weapon("Shock Grenade", Rarity.RARE, "ShockGrenade_03"),
        Weapon("Shock Grenade", Rarity.EPIC, "ShockGrenade_04"),
        Weapon("Shock Grenade", Rarity.EXOTIC, "ShockGrenade_05"),
        Weapon("Gas Grenade", Rarity.UNCOMMON, "Consumable_GasGrenade_01"),
        Weapon("Suicide", Rarity.COMMON, "Suicide"),
        Weapon("Fall", Rarity.UNCOMMON, "Fall"),
        Weapon("Lightning Strike", Rarity.RARE, "LightningStrike_BP"),
    ]
}


def get_actor(log_name):
    """Case-insensitive lookup by log name; None when the actor is unknown."""
    if log_name is None:
        return None
    return ACTORS.get(log_name.lower())


def get_weapon(log_name):
    """Case-insensitive lookup by log name; None when the weapon is unknown."""
    if log_name is None:
        return None
    return WEAPONS.get(log_name.lower())
