#!/usr/bin/env python3
"""
Bitview Example: Decoding a Register Value

This example compiles a format description for a small status register,
loads a value into it and prints every field with its enum name.
"""

import bitview as bv

STATUS_FORMAT = '''
#define STATE_IDLE 0
#define STATE_RUN 1
#define STATE_ERR 3

enum Speed { SLOW, FAST = 2, TURBO };

state:2:lightgreen:STATE:Controller state
speed:2::Speed
count:4
irq:~7:red
'''


def describe(fmt, reg):
    for field in fmt.fields:
        value = reg.read_field(field.index, field.width)
        names = [k for k, v in field.enums.items() if v == value]
        label = f' ({names[0]})' if names else ''
        print(f'{field.name:>8} [{field.high}:{field.low}] = {value:#x}{label}')

    for index, bit in sorted(fmt.bits.items()):
        print(f'{bit.name:>8} [{index}] = {reg[index]}')


def main():
    fmt = bv.compile_format(STATUS_FORMAT)

    reg = bv.Register(fmt.width)
    reg.from_text('0x7a', 16)

    print(reg.summary(bv.DisplayOptions(radix=2)))
    describe(fmt, reg)

    # set the speed field by enum name
    speed = fmt['speed']
    reg.write_field(speed.index, speed.width, speed.enums['TURBO'])
    print(reg.summary(bv.DisplayOptions()))


if __name__ == '__main__':
    main()
