import unittest

from safer_scraper import ScanState, SectionScanner, extract_checked_items, extract_region, load, scan_section
from safer_scraper.section_scanner import render_section


def checklist(*pairs):
    """Nested checklist table markup from (marker, label) pairs."""
    rows = ''.join(f'<tr><td>{marker}</td><td>{label}</td></tr>' for marker, label in pairs)
    return f'<table>{rows}</table>'


def container(*rows):
    return load('<table id="main">' + ''.join(rows) + '</table>').query_one('#main')


CARGO_HEADER = '<tr><td>Cargo Carried:</td></tr>'


class TestScanSection(unittest.TestCase):
    """Checked item collection from checklist sections."""

    def test_cargo_carried_scenario(self):
        main = container(
            '<tr><td>Cargo Carried</td></tr>',
            '<tr><td>' + checklist(('X', 'General Freight'), (' ', 'Household Goods')) + '</td></tr>',
        )
        items = scan_section(main, 'Cargo Carried')
        self.assertEqual(items, ['General Freight'])
        self.assertEqual(render_section('Cargo Carried', items), '| Cargo Carried: | General Freight |')

    def test_safer_labels_are_excluded(self):
        main = container(
            CARGO_HEADER,
            '<tr><td>' + checklist(('X', 'SAFER System'), ('X', 'General Freight')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Cargo Carried'), ['General Freight'])

    def test_marker_must_be_exactly_x(self):
        main = container(
            CARGO_HEADER,
            '<tr><td>' + checklist(('x', 'Lowercase'), ('XX', 'Double'), (' X ', 'Padded'), ('X', '')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Cargo Carried'), ['Padded'])

    def test_duplicates_across_nested_tables(self):
        main = container(
            CARGO_HEADER,
            '<tr><td>'
            + checklist(('X', 'General Freight'), ('X', 'Hazmat'))
            + '</td><td>'
            + checklist(('X', 'General Freight'), ('X', 'Chemicals'))
            + '</td></tr>',
        )
        items = scan_section(main, 'Cargo Carried')
        self.assertEqual(items, ['General Freight', 'Hazmat', 'Chemicals'])
        self.assertEqual(
            render_section('Cargo Carried', items),
            '| Cargo Carried: | General Freight, Hazmat, Chemicals |'
        )

    def test_missing_section(self):
        main = container(
            '<tr><td>Carrier Operation:</td></tr>',
            '<tr><td>' + checklist(('X', 'Interstate')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Cargo Carried'), [])
        self.assertEqual(render_section('Cargo Carried', []), '')

    def test_only_the_row_after_the_header_is_captured(self):
        main = container(
            CARGO_HEADER,
            '<tr><td>Not a checklist</td></tr>',
            '<tr><td>' + checklist(('X', 'General Freight')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Cargo Carried'), [])

    def test_title_matching_is_substring_containment(self):
        main = container(
            '<tr><td>Operation Classification:</td></tr>',
            '<tr><td>' + checklist(('X', 'Auth. For Hire')) + '</td></tr>',
            '<tr><td>Carrier Operation:</td></tr>',
            '<tr><td>' + checklist(('X', 'Interstate')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Operation'), ['Auth. For Hire', 'Interstate'])
        self.assertEqual(scan_section(main, 'Carrier Operation'), ['Interstate'])

    def test_header_wrapped_in_layout_table(self):
        main = container(
            '<tr><td><table><tr><td>Cargo Carried:</td></tr></table></td></tr>',
            '<tr><td>' + checklist(('X', 'General Freight')) + '</td></tr>',
        )
        self.assertEqual(scan_section(main, 'Cargo Carried'), ['General Freight'])

    def test_rows_of_body_grouping(self):
        main = load(
            '<table id="main"><tbody>'
            + CARGO_HEADER
            + '<tr><td>' + checklist(('X', 'Livestock')) + '</td></tr>'
            '</tbody></table>'
        ).query_one('#main')
        self.assertEqual(scan_section(main, 'Cargo Carried'), ['Livestock'])

    def test_extract_checked_items_without_container(self):
        doc = load('<p>no tables</p>')
        self.assertEqual(extract_checked_items(doc, '#main', 'Cargo Carried'), '')


class TestSectionScanner(unittest.TestCase):
    """State transitions of the scanner."""

    def setUp(self):
        self.rows = load(
            '<table>'
            '<tr><td>Cargo Carried:</td></tr>'
            '<tr><td>plain</td></tr>'
            '<tr><td>Cargo Carried:</td></tr>'
            '<tr><td>' + checklist(('X', 'Livestock')) + '</td></tr>'
            '</table>'
        ).query('table > tr')

    def test_transitions(self):
        scanner = SectionScanner('Cargo Carried')
        self.assertIs(scanner.state, ScanState.IDLE)

        scanner.feed(self.rows[0])
        self.assertIs(scanner.state, ScanState.CAPTURING)

        scanner.feed(self.rows[1])
        self.assertIs(scanner.state, ScanState.DONE)
        self.assertEqual(scanner.items, [])

        scanner.feed(self.rows[2])
        self.assertIs(scanner.state, ScanState.CAPTURING)

        scanner.feed(self.rows[3])
        self.assertIs(scanner.state, ScanState.DONE)
        self.assertEqual(scanner.items, ['Livestock'])
        self.assertEqual(scanner.occurrences, 2)


class TestExtractRegion(unittest.TestCase):
    """Bounded regions of a container table."""

    HTML = (
        '<table id="main">'
        '<tr><td>Header above the region</td><td>ignored</td></tr>'
        '<tr><td colspan="4">USDOT INFORMATION</td></tr>'
        '<tr><th>Entity Type:</th><td>CARRIER</td><th>USDOT Status:</th><td>ACTIVE</td><td>extra</td></tr>'
        '<tr><th>Legal Name:</th><td colspan="3">ACME <span class="hidden">x</span>TRUCKING LLC</td></tr>'
        '<tr><th>Power Units:</th><td>12</td><th>Drivers:</th><td>14</td>'
        '<td><table><tr><td>Non-CMV Units:</td><td>0</td></tr></table></td></tr>'
        '<tr><td> </td><td></td></tr>'
        '<tr><td>Operation Classification:</td></tr>'
        '<tr><td>After the region</td><td>ignored</td></tr>'
        '</table>'
    )

    def test_region_rows(self):
        main = load(self.HTML).query_one('#main')
        grid = extract_region(
            main,
            start_title='USDOT INFORMATION',
            stop_titles=('Operation Classification', 'Carrier Operation', 'Cargo Carried'),
            skip_markers=('Non-CMV Units:',),
            max_columns=4,
        )
        self.assertEqual(grid, [
            ['Entity Type:', 'CARRIER', 'USDOT Status:', 'ACTIVE'],
            ['Legal Name:', 'ACME TRUCKING LLC'],
            ['Power Units:', '12', 'Drivers:', '14', 'Non-CMV Units:0'],
        ])

    def test_region_not_found(self):
        main = load(self.HTML).query_one('#main')
        self.assertEqual(extract_region(main, 'MISSING', ('Cargo Carried',)), [])


if __name__ == '__main__':
    unittest.main()
