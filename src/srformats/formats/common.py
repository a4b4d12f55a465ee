"""Enumerations shared by several container formats.

Both enums are decoded strictly: a value outside the table raises
``UnknownEnumValue``.
"""

from __future__ import annotations

from enum import IntEnum

from ..decoding.flags import enum_u32

__all__ = ["ResourceType", "AnimationType", "resource_type", "animation_type"]


class ResourceType(IntEnum):
    # Characters of all races
    CHARACTER = 0x20000
    # NPCs, monsters, pets
    NPC = 0x20001
    BUILDING = 0x20002
    # Static map objects that are not buildings
    ARTIFACT = 0x20003
    NATURE = 0x20004
    ITEM = 0x20005
    # Drops, marks
    OTHER = 0x20006
    COMPOUND_CHARACTER = 0x30000
    COMPOUND_OBJECT = 0x30002


class AnimationType(IntEnum):
    POSE = 0x3C
    STAND1 = 0x00
    STAND2 = 0x7A
    STAND3 = 0x3D
    STAND4 = 0x51
    ATT_READY = 0x06
    TURN_L = 0x18
    TURN_R = 0x19
    SIT_DOWN = 0x0D
    SIT = 0x0E
    STAND_UP = 0x0F
    DEFENCE = 0x16
    WALK = 0x01
    WALK_BACK = 0x17
    RUN = 0x07
    ATTACK1 = 0x02
    ATTACK2 = 0x05
    ATTACK3 = 0x10
    ATTACK4 = 0x11
    ATTACK5 = 0xB7
    ATTACK6 = 0xB8
    ATTACK7 = 0xB9
    ATTACK8 = 0xBA
    ATTACK9 = 0xBE
    REVOLUTION = 0x27
    SKILL1 = 0x1A
    SKILL2 = 0x1B
    SKILL3 = 0x1C
    SKILL4 = 0x1D
    SKILL5 = 0x1E
    SKILL6 = 0x1F
    SKILL7 = 0x20
    SKILL8 = 0x21
    SKILL9 = 0x22
    SKILL10 = 0x23
    SKILL11 = 0x44
    SKILL12 = 0x45
    SKILL13 = 0x46
    SKILL14 = 0x47
    SKILL15 = 0x48
    SKILL16 = 0x49
    SKILL17 = 0x4A
    SKILL18 = 0x4B
    SKILL19 = 0x4C
    SKILL20 = 0x4D
    SKILL21 = 0x65
    SKILL22 = 0x66
    SKILL23 = 0x67
    SKILL24 = 0x68
    SKILL25 = 0x69
    SKILL26 = 0x6A
    SKILL27 = 0x6B
    SKILL28 = 0x6C
    SKILL29 = 0x6D
    SKILL30 = 0x6E
    SKILL31 = 0x6F
    SKILL32 = 0x70
    SKILL33 = 0x71
    SKILL34 = 0x72
    SKILL35 = 0x73
    SKILL36 = 0x74
    SKILL37 = 0x75
    SKILL38 = 0x76
    SKILL39 = 0x77
    SKILL40 = 0x78
    SKILL41 = 0x7B
    SKILL42 = 0x7C
    SKILL43 = 0x7D
    SKILL44 = 0x7E
    SKILL45 = 0x7F
    SKILL46 = 0x80
    SKILL47 = 0x81
    SKILL48 = 0x82
    SKILL49 = 0x83
    SKILL50 = 0x84
    SKILL51 = 0x85
    SKILL52 = 0x86
    SKILL53 = 0x87
    SKILL54 = 0x88
    SKILL55 = 0x89
    SKILL56 = 0x8A
    SKILL57 = 0x8B
    SKILL58 = 0x8C
    SKILL59 = 0x8D
    SKILL60 = 0x8E
    SKILL61 = 0x8F
    SKILL62 = 0x90
    SKILL63 = 0x91
    SKILL64 = 0x92
    SKILL65 = 0x93
    SKILL66 = 0x94
    SKILL67 = 0x95
    SKILL68 = 0x96
    SKILL69 = 0x97
    SKILL70 = 0x98
    SKILL71 = 0x99
    SKILL72 = 0x9A
    SKILL73 = 0x9B
    SKILL74 = 0x9C
    SKILL75 = 0x9D
    SKILL76 = 0x9E
    SKILL77 = 0x9F
    SKILL78 = 0xA0
    SKILL79 = 0xA1
    SKILL80 = 0xA2
    SKILL81 = 0xA3
    SKILL82 = 0xA4
    SKILL83 = 0xA5
    SKILL84 = 0xA6
    SKILL85 = 0xA7
    SKILL86 = 0xA8
    SKILL87 = 0xA9
    SKILL88 = 0xAA
    SKILL89 = 0xAB
    SKILL90 = 0xAC
    SKILL91 = 0xAD
    SKILL92 = 0xAE
    SKILL93 = 0xAF
    SKILL94 = 0xB0
    SKILL95 = 0xB1
    SKILL96 = 0xB2
    SKILL97 = 0xB3
    SKILL98 = 0xB4
    SKILL99 = 0xB5
    SKILL100 = 0xB6
    READY1 = 0x28
    READY2 = 0x29
    READY3 = 0x2A
    READY4 = 0x2B
    READY5 = 0x2C
    WAIT1 = 0x5B
    WAIT2 = 0x5C
    WAIT3 = 0x5D
    WAIT4 = 0x5E
    WAIT5 = 0x5F
    HAMMER = 0xBB
    HAND_LOOF = 0xBC
    THROW = 0xBD
    MG_SSELF = 0x13
    MG_SOTHER = 0x14
    DAMAGE1 = 0x03
    DAMAGE2 = 0x09
    HELP = 0x43
    FIND = 0x4E
    STUN = 0x4F
    DIE1 = 0x04
    DIE1_RM = 0x24
    DIE2 = 0x12
    DIE2_RM = 0x25
    REVIVAL = 0x79
    DOWN = 0x3E
    DOWN_RM = 0x3F
    DOWN_DAMAGE = 0x40
    DOWN_UP = 0x41
    DOWN_DIE = 0x42
    PICK = 0x26
    CLICK = 0x0A
    CB_YEONHWAN = 0x0B
    CB2 = 0x0C
    ET_BYE = 0x15
    EMOTION01 = 0x32
    EMOTION02 = 0x33
    EMOTION03 = 0x34
    EMOTION04 = 0x35
    EMOTION05 = 0x36
    EMOTION06 = 0x37
    EMOTION07 = 0x38
    EMOTION08 = 0x39
    EMOTION09 = 0x3A
    EMOTION10 = 0x3B
    VENDOR01 = 0x50
    SHOT = 0xBF


resource_type = enum_u32(ResourceType)
animation_type = enum_u32(AnimationType)
