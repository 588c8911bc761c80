#!/usr/bin/env python3

import unittest

import bitview as bv
from bitview.format import Format, compile_format


def layout(fmt):
    return [(f.name, f.index, f.width) for f in fmt.fields]


class FormatLayoutTests(unittest.TestCase):
    def test_fields_msb_first(self):
        fmt = Format.from_string('a:1\nb:3\nc:4')
        self.assertEqual(fmt.width, 8)
        self.assertEqual(layout(fmt), [('a', 7, 1), ('b', 4, 3), ('c', 0, 4)])
        self.assertEqual(dict(fmt.bits), {})

    def test_indicator_only(self):
        fmt = Format.from_string('flag:~10')
        self.assertEqual(fmt.width, 11)
        self.assertEqual(layout(fmt), [('', 0, 11)])
        self.assertEqual(list(fmt.bits), [10])
        self.assertEqual(fmt.bits[10].name, 'flag')
        self.assertEqual(fmt.bits[10].index, 10)

    def test_padding_above_fields(self):
        fmt = Format.from_string('a:4\nf:~6')
        self.assertEqual(fmt.width, 7)
        self.assertEqual(layout(fmt), [('', 4, 3), ('a', 0, 4)])

    def test_indicators_inside_fields(self):
        fmt = Format.from_string('hi:4\nlo:4\nready:~7:green\nerr:~0:red')
        self.assertEqual(fmt.width, 8)
        self.assertEqual(layout(fmt), [('hi', 4, 4), ('lo', 0, 4)])
        self.assertEqual(sorted(fmt.bits), [0, 7])
        self.assertEqual(fmt.bits[7].color, 'green')

    def test_comments_and_blank_lines(self):
        fmt = Format.from_string('/* status register */\n\na:4\n// low half\nb:4\n')
        self.assertEqual(layout(fmt), [('a', 4, 4), ('b', 0, 4)])

    def test_width_conservation(self):
        sources = [
            'a:1\nb:3\nc:4',
            'x:~31',
            'a:5\nb:~20\nc:~3',
            'sign:1\nexp:8\nfrac:23',
            'a\nb\nc:~2',
        ]
        for src in sources:
            with self.subTest(src=src):
                fmt = Format.from_string(src)
                self.assertEqual(fmt.width, sum(f.width for f in fmt.fields))
                if fmt.bits:
                    self.assertGreaterEqual(fmt.width, max(fmt.bits) + 1)

                covered = []
                for f in fmt.fields:
                    covered.extend(range(f.index, f.index + f.width))
                self.assertEqual(sorted(covered), list(range(fmt.width)))

    def test_continued_field_line(self):
        fmt = Format.from_string('a:4:red::\\\nsee manual\nb:4')
        self.assertEqual(layout(fmt), [('a', 4, 4), ('b', 0, 4)])
        self.assertEqual(fmt['a'].color, 'red')
        self.assertEqual(fmt['a'].comment, 'see manual')

    def test_getitem(self):
        fmt = Format.from_string('a:4\nb:4\nf:~2')
        self.assertEqual(fmt['b'].index, 0)
        self.assertEqual(fmt['f'].index, 2)
        with self.assertRaises(KeyError):
            fmt['missing']

    def test_iter(self):
        fmt = Format.from_string('a:4\nb:4')
        self.assertEqual([f.name for f in fmt], ['a', 'b'])

    def test_immutable(self):
        fmt = Format.from_string('enum E { A };\na:4::E\nf:~2')
        self.assertIsInstance(fmt.fields, tuple)
        with self.assertRaises(TypeError):
            fmt.bits[3] = fmt.bits[2]
        with self.assertRaises(TypeError):
            fmt.enum_types['E']['B'] = 1


class FormatEnumTests(unittest.TestCase):
    def test_named_enum(self):
        fmt = Format.from_string('enum Color { RED, GREEN, BLUE=5 }\nc:3::Color')
        self.assertEqual(fmt['c'].enums, {'RED': 0, 'GREEN': 1, 'BLUE': 5})
        self.assertEqual(dict(fmt.enum_types['Color']), {'RED': 0, 'GREEN': 1, 'BLUE': 5})
        self.assertTrue(fmt.has_enums)

    def test_three_colons_reach_the_comment(self):
        fmt = Format.from_string('enum Color { RED, GREEN, BLUE=5 }\nc:3:::Color')
        self.assertEqual(fmt['c'].comment, 'Color')
        self.assertIsNone(fmt['c'].enum_refs)
        self.assertEqual(fmt['c'].enums, {})
        self.assertFalse(fmt.has_enums)

    def test_defines(self):
        fmt = Format.from_string('#define MODE_A 1\n#define MODE_B 0x2\n#define OTHER 3\nm:2::MODE')
        self.assertEqual(dict(fmt.enum_types[None]), {'MODE_A': 1, 'MODE_B': 2, 'OTHER': 3})
        self.assertEqual(fmt['m'].enums, {'MODE_A': 1, 'MODE_B': 2})

    def test_define_prefix_is_case_insensitive(self):
        fmt = Format.from_string('#define Speed_Low 0\n#define SPEED_HIGH 1\ns:1::speed')
        self.assertEqual(fmt['s'].enums, {'Speed_Low': 0, 'SPEED_HIGH': 1})

    def test_typedef_alias(self):
        fmt = Format.from_string('typedef enum { A, B } Mode;\nm:2::Mode')
        self.assertEqual(fmt['m'].enums, {'A': 0, 'B': 1})
        self.assertIn('Mode', fmt.enum_types)

    def test_typedef_both_names(self):
        fmt = Format.from_string('typedef enum tag { A = 2 } Alias;\nx:2::tag\ny:2::Alias')
        self.assertEqual(fmt['x'].enums, {'A': 2})
        self.assertEqual(fmt['y'].enums, {'A': 2})

    def test_anonymous_typedef_merges_into_macros(self):
        fmt = Format.from_string('typedef enum { X_ON = 3 };\nf:2::X')
        self.assertEqual(dict(fmt.enum_types[None]), {'X_ON': 3})
        self.assertEqual(fmt['f'].enums, {'X_ON': 3})

    def test_anonymous_enum_merges_into_macros(self):
        fmt = Format.from_string('enum { P_A, P_B };\nf:2::p_')
        self.assertEqual(fmt['f'].enums, {'P_A': 0, 'P_B': 1})

    def test_named_enum_wins_over_macro(self):
        fmt = Format.from_string('#define ON 7\nenum Mode { ON = 1 };\nf:2::Mode,ON')
        self.assertEqual(fmt['f'].enums, {'ON': 1})

    def test_indicator_enums(self):
        fmt = Format.from_string('#define RDY_YES 1\nr:~0::RDY')
        self.assertEqual(fmt.bits[0].enums, {'RDY_YES': 1})

    def test_without_refs(self):
        fmt = Format.from_string('enum E { A };\na:4')
        self.assertEqual(fmt['a'].enums, {})
        self.assertFalse(fmt.has_enums)


class FormatErrorTests(unittest.TestCase):
    def test_malformed(self):
        bad = [
            '#define A',
            '#define A B',
            '#include <x.h>',
            '#define A 0xZZ',
            'enum { 1 };\na:1',
            'typedef struct { int a; } S;',
            'a:4\nb:3x',
            'a:~',
        ]
        for src in bad:
            with self.subTest(src=src):
                with self.assertRaises(bv.MalformedFormatError):
                    Format.from_string(src)

    def test_error_offset_after_continuation(self):
        src = '#define A \\\n 1\nbad:x'
        with self.assertRaisesRegex(bv.MalformedFormatError, f'at {src.index("bad")}:'):
            Format.from_string(src)

    def test_enum_error_is_chained(self):
        with self.assertRaises(bv.MalformedFormatError) as cm:
            Format.from_string('enum E { A = };\na:1')
        self.assertIsInstance(cm.exception.__cause__, bv.MalformedEnumError)

    def test_failure_is_logged(self):
        with self.assertLogs('bitview.format', level='INFO'):
            with self.assertRaises(bv.MalformedFormatError):
                Format.from_string('a:3x')

    def test_success_is_logged(self):
        with self.assertLogs('bitview.format', level='DEBUG') as cm:
            Format.from_string('a:4')
        self.assertIn('width 4', cm.output[0])


class CompileFormatTests(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(compile_format(''))
        self.assertIsNone(compile_format('  \n'))
        self.assertIsNone(compile_format('// nothing yet'))
        self.assertIsNone(compile_format('#define A 1'))

    def test_empty_format(self):
        fmt = Format.from_string('enum E { A };')
        self.assertTrue(fmt.is_empty)
        self.assertEqual(fmt.width, 0)
        self.assertIn('E', fmt.enum_types)

    def test_compile(self):
        fmt = compile_format('a:4\nb:4')
        self.assertEqual(fmt.width, 8)

    def test_malformed_raises(self):
        with self.assertRaises(bv.MalformedFormatError):
            compile_format('a:0')


if __name__ == '__main__':
    unittest.main()
