from __future__ import annotations

def genmask(index: int, width: int):
    return ((1 << width) - 1) << index

def get_field_value(r_val: int, index: int, width: int):
    return (r_val >> index) & ((1 << width) - 1)

def set_field_value(r_val: int, index: int, width: int, f_val: int):
    mask = genmask(index, width)
    return (r_val & ~mask) | ((f_val << index) & mask)

def toggle_bit(r_val: int, index: int):
    return r_val ^ (1 << index)

def to_signed(u_val: int, width: int):
    if width <= 0:
        return 0
    if u_val >= 1 << (width - 1):
        return u_val - (1 << width)
    return u_val
