"""
Unit tests for the HTML transformation passes.

Fragments are written the way the generic renderer emits them: macro markers
followed by the rendered content of their brace groups.
"""

import pytest

from vitae.contexts.conversion.html_patterns import LIST_MARKERS, SEPARATOR, marker
from vitae.contexts.conversion.transformers import (
    EntryOrigin,
    apply_final_cleanups,
    cleanup_paragraph_wrappers,
    merge_date_ranges,
    parse_education_entry,
    process_abstract,
    process_contact_header,
    process_heading_list_macros,
    process_list_macros,
    process_quad_details,
    process_quad_headings,
    process_technical_skills,
    process_title_block,
    process_trio_headings,
    promote_headings,
    replace_math_pipes,
)
from vitae.contexts.extraction import DocumentMetadata, extract_resume_macros

TRIO = marker("resumeTrioHeading")
QUAD_DETAILS = marker("resumeQuadHeadingDetails")
QUAD = marker("resumeQuadHeading")
ULINE = marker("uline")


class TestTitleHeadingsAbstract:
    """Tests for the title, heading, abstract and math pipe passes."""

    def test_title_block_replaces_maketitle(self):
        fragment = f'<p>{marker("maketitle")}</p>\n<p>Body</p>'
        metadata = DocumentMetadata(title="Jane <Doe>", author="J. Doe", date="2025-01-15")
        result = process_title_block(fragment, metadata)

        assert '<h1 class="title">Jane &lt;Doe&gt;</h1>' in result
        assert '<div class="author">J. Doe</div>' in result
        assert '<div class="date">2025-01-15</div>' in result
        assert "maketitle" not in result

    def test_title_block_without_marker(self):
        fragment = "<p>Body</p>"
        assert process_title_block(fragment, DocumentMetadata()) == fragment

    def test_promote_headings_one_level(self):
        """h3 becomes h2 and h4 becomes h3, each exactly once."""
        fragment = '<h3>Experience</h3><h4 id="x">Acme</h4><h2>Top</h2><h5>Deep</h5>'
        result = promote_headings(fragment)

        assert result == '<h2>Experience</h2><h3 id="x">Acme</h3><h2>Top</h2><h5>Deep</h5>'

    def test_abstract_heading_inserted(self):
        fragment = '<div class="environment abstract"><p>Summary</p></div>'
        result = process_abstract(fragment)

        assert result.startswith('<h2>Abstract</h2><div class="environment abstract">')

    def test_math_pipes(self):
        fragment = 'a <span class="inline-math">|</span> b <span class="inline-math">x</span>'
        result = replace_math_pipes(fragment)

        assert result == f'a {SEPARATOR} b <span class="inline-math">x</span>'


class TestContactHeader:
    """Tests for process_contact_header."""

    def _block(self, details: str) -> str:
        return (
            '<div class="environment tabular*">'
            '<span class="textsize-Huge">Jane Doe</span> <br class="linebreak"> '
            f"{details}</div>\n<h2>Education</h2>"
        )

    def test_dual_layout(self):
        details = (
            f'{marker("faEnvelope")} <a class="href" href="mailto:jane@example.com">jane@example.com</a>'
            f' {SEPARATOR} {marker("faMobile")} +1 555 010 0199 &#x26; '
            f'{marker("faGithub")} <a class="href" href="https://github.com/janedoe">github.com/janedoe</a>'
        )
        result = process_contact_header(self._block(details))

        assert '<div class="contact dual">' in result
        assert '<div class="contact-name">Jane Doe</div>' in result
        assert '<i class="fas fa-envelope"></i>' in result
        assert (
            '<span class="contact-mobile"><i class="fas fa-mobile"></i> +1 555 010 0199</span>'
            in result
        )
        assert '<div class="contact-right"><i class="fab fa-github"></i>' in result
        assert 'class="href"' not in result
        assert result.endswith("<h2>Education</h2>")

    def test_centered_layout_without_ampersand(self):
        details = f'{marker("faEnvelope")} jane@example.com'
        result = process_contact_header(self._block(details))

        assert '<div class="contact centered">' in result
        assert "contact-right" not in result

    def test_tabular_after_first_heading_untouched(self):
        fragment = '<h2>Skills</h2><div class="environment tabular">A &#x26; B</div>'
        assert process_contact_header(fragment) == fragment

    def test_nested_name_switches_keep_spans_balanced(self):
        """A bold, sized, small-caps name yields a balanced contact-name element."""
        block = (
            '<div class="environment tabular*">'
            '<strong><span class="textsize-Huge"><span class="scshape">Jake Ryan</span></span></strong>'
            f' <br class="linebreak"> {marker("faEnvelope")} jake@example.com</div>\n<h2>Education</h2>'
        )
        result = process_contact_header(block)

        name_start = result.index('<div class="contact-name">')
        name_html = result[name_start: result.index("</div>", name_start)]
        assert "Jake Ryan" in name_html
        assert name_html.count("<span") == name_html.count("</span>")
        assert '<div class="contact-links"><i class="fas fa-envelope"></i> jake@example.com</div>' in result


class TestArgumentHeadings:
    """Tests for trio, quad-details and date-range passes."""

    def test_trio_heading(self):
        macros = extract_resume_macros(
            r"\resumeTrioHeading{Converter}{Python}{\href{https://github.com/u/r}{\uline{Source Code}}}"
        )
        fragment = (
            f'<p>{TRIO}Converter Python<a class="href" href="https://github.com/u/r">'
            f"{ULINE}Source Code</a></p>"
        )
        result = process_trio_headings(fragment, macros.trio)

        assert '<div class="trio-title"><strong>Converter</strong></div>' in result
        assert '<div class="trio-tech"><em>Python</em></div>' in result
        assert 'href="https://github.com/u/r" target="_blank"' in result
        assert TRIO not in result

    def test_trio_region_spans_separators_and_formatting(self):
        """Inline formatting and separators in the tech argument stay inside one trio row."""
        macros = extract_resume_macros(
            r"\resumeTrioHeading{Proj}{\emph{Python $|$ Go}}{\href{https://g.com/x}{\uline{Code}}}"
        )
        fragment = (
            f'<p>{TRIO}Proj<em>Python {SEPARATOR} Go</em>'
            f'<a class="href" href="https://g.com/x">{ULINE}Code</a></p>'
        )
        result = process_trio_headings(fragment, macros.trio)

        assert result.count("Code</a>") == 1
        assert f'<div class="trio-tech"><em><em>Python {SEPARATOR} Go</em></em></div>' in result
        assert "\\emph" not in result
        assert result.endswith("\n</div></p>")

    def test_trio_desync_leaves_marker_unchanged(self):
        """A marker with no invocation tuple is left exactly as rendered."""
        macros = extract_resume_macros(r"\resumeTrioHeading{One}{Go}{Link}")
        fragment = f"<p>{TRIO}One Go Link</p>\n<p>{TRIO}Two Rust Link</p>"
        result = process_trio_headings(fragment, macros.trio)

        assert result.count('<div class="trio">') == 1
        assert f"<p>{TRIO}Two Rust Link</p>" in result

    def test_quad_details_with_href_and_final_cleanup(self):
        """An underlined link becomes a bold anchor with a target and no stray markers."""
        macros = extract_resume_macros(
            r"\resumeQuadHeadingDetails{\href{https://acme.example.com}{\uline{Acme Corp}}}"
            r"{Oct 2023 -- Present}{Software Engineer}"
        )
        fragment = (
            f'<p>{QUAD_DETAILS}<a class="href" href="https://acme.example.com">{ULINE}Acme Corp</a>'
            f"Oct 2023 – PresentSoftware Engineer</p>"
        )
        result = apply_final_cleanups(process_quad_details(fragment, macros.quad_details))

        assert (
            '<a href="https://acme.example.com" target="_blank" rel="noopener noreferrer">'
            "<strong>Acme Corp</strong></a>" in result
        )
        assert '<span class="date">Oct 2023 – Present</span>' in result
        assert "<em>Software Engineer</em>" in result
        assert "macro-uline" not in result
        assert result.count("target=") == 1

    def test_merge_date_ranges(self):
        """A closing date token that leaked into the role moves back to the date."""
        macros = extract_resume_macros(
            r"\resumeQuadHeadingDetails{Acme}{Oct 2023 --}{Present Engineer}"
        )
        fragment = process_quad_details(f"{QUAD_DETAILS}Acme", macros.quad_details)
        assert '<span class="date">Oct 2023 –</span>' in fragment

        result = merge_date_ranges(fragment)

        assert '<span class="date">Oct 2023 – Present</span>' in result
        assert "<em>Engineer</em>" in result

    def test_merge_date_ranges_leaves_complete_ranges(self):
        macros = extract_resume_macros(
            r"\resumeQuadHeadingDetails{Acme}{Oct 2023 -- Present}{Engineer}"
        )
        fragment = process_quad_details(f"{QUAD_DETAILS}Acme", macros.quad_details)

        assert merge_date_ranges(fragment) == fragment


class TestTechnicalSkills:
    """Tests for process_technical_skills."""

    FRAGMENT = (
        "<h2>Experience</h2><p>Work</p>"
        f'<h2>Technical Skills</h2><p>{marker("resumeSectionType")}Languages:Python</p>'
        "<h2>Awards</h2><p>Prize</p>"
    )

    def test_rows_replace_section_body(self):
        macros = extract_resume_macros(
            r"\resumeSectionType{Languages}{:}{Python, Go}\resumeSectionType{Tools}{:}{Docker}"
        )
        result = process_technical_skills(self.FRAGMENT, macros.section_type)

        assert result.count('<div class="skill-row">') == 2
        assert '<div class="skill-label"><strong>Languages</strong></div>' in result
        assert '<div class="skill-content">Python, Go</div>' in result
        assert "<h2>Awards</h2><p>Prize</p>" in result
        assert "macro-resumeSectionType" not in result

    def test_section_at_end_of_fragment(self):
        fragment = f'<h2>Technical Skills</h2><p>{marker("resumeSectionType")}x</p>'
        macros = extract_resume_macros(r"\resumeSectionType{Tools}{:}{Git}")
        result = process_technical_skills(fragment, macros.section_type)

        assert '<div class="skill-content">Git</div>' in result
        assert "<p>" not in result

    def test_no_tuples_leaves_section(self):
        assert process_technical_skills(self.FRAGMENT, ()) == self.FRAGMENT


class TestEducation:
    """Tests for education entries."""

    def test_structured_entry(self):
        macros = extract_resume_macros(
            r"\resumeQuadHeading{National Example University}{Hsinchu, Taiwan}"
            r"{Bachelor of Science in Computer Science}{Sep. 2019 -- Jun. 2023}"
        )
        fragment = f"<p>{QUAD}National Example UniversityHsinchu, Taiwan</p>"
        result = process_quad_headings(fragment, macros.quad_heading)

        assert '<div class="left"><strong>National Example University</strong></div>' in result
        assert '<div class="right">Hsinchu, Taiwan</div>' in result
        assert "<em>Bachelor of Science in Computer Science</em>" in result
        assert "<em>Sep. 2019 – Jun. 2023</em>" in result

    def test_heuristic_glued_institution(self):
        """Without a tuple, a glued institution/location is split heuristically."""
        entry = parse_education_entry(
            "National Example UniversityHsinchu, Taiwan Bachelor of Science in "
            "Computer Science Sep. 2019 – Jun. 2023",
            None,
        )

        assert entry.origin is EntryOrigin.HEURISTIC
        assert entry.institution == "National Example University"
        assert entry.location == "Hsinchu, Taiwan"
        assert entry.degree == "Bachelor of Science in Computer Science"
        assert entry.dates == "Sep. 2019 – Jun. 2023"

    def test_heuristic_city_country(self):
        entry = parse_education_entry(
            "Example College, Boston, USA Master of Science in Physics Sep 2020 – May 2022", None
        )

        assert entry.institution == "Example College"
        assert entry.location == "Boston, USA"
        assert entry.degree == "Master of Science in Physics"

    def test_heuristic_miss_leaves_marker(self):
        fragment = f"<p>{QUAD}Some unrelated text</p>"
        assert parse_education_entry("Some unrelated text", None) is None
        assert process_quad_headings(fragment, ()) == fragment


class TestListsAndWrappers:
    """Tests for list, heading-list and paragraph cleanup passes."""

    def test_item_list(self):
        fragment = (
            f"<p>{LIST_MARKERS.start} {LIST_MARKERS.item}First item "
            f"{LIST_MARKERS.item}Second item {LIST_MARKERS.end}</p>"
        )
        result = process_list_macros(fragment)

        assert '<ul class="resume-items"><li>First item</li><li>Second item</li></ul>' in result
        assert result.count("<li>") == 2

    def test_multiple_lists(self):
        one = f"{LIST_MARKERS.start}{LIST_MARKERS.item}A{LIST_MARKERS.end}"
        two = f"{LIST_MARKERS.start}{LIST_MARKERS.item}B{LIST_MARKERS.end}"
        result = process_list_macros(one + " middle " + two)

        assert result == (
            '<ul class="resume-items"><li>A</li></ul> middle <ul class="resume-items"><li>B</li></ul>'
        )

    def test_unclosed_list_left_in_place(self):
        fragment = f"{LIST_MARKERS.start}{LIST_MARKERS.item}A"
        assert process_list_macros(fragment) == fragment

    def test_heading_list(self):
        fragment = f"{LIST_MARKERS.heading_start}x{LIST_MARKERS.heading_end}"
        assert process_heading_list_macros(fragment) == '<div class="resume-heading-list">x</div>'

    def test_paragraph_wrappers_removed(self):
        fragment = (
            '<p><div class="resume-heading-list"> <div class="quad">Q</div> </div></p>\n'
            "<p> </p>\n<p>Keep</p>"
        )
        result = cleanup_paragraph_wrappers(fragment)

        assert result.startswith('<div class="resume-heading-list">')
        assert "</div></p>" not in result
        assert "<p> </p>" not in result
        assert "<p>Keep</p>" in result


class TestFinalCleanups:
    """Tests for apply_final_cleanups."""

    def test_percent_spacing(self):
        assert apply_final_cleanups("cut 40%across teams") == "cut 40% across teams"

    def test_anchor_targets_added_once(self):
        fragment = (
            '<a  href="https://x.com">x</a> <a class="href" href="http://y.com">y</a> '
            '<a href="mailto:a@b.c">mail</a> <a href="#top">top</a>'
        )
        result = apply_final_cleanups(fragment)

        assert '<a href="https://x.com" target="_blank" rel="noopener noreferrer">' in result
        assert '<a href="http://y.com" target="_blank" rel="noopener noreferrer">' in result
        assert '<a href="mailto:a@b.c">' in result
        assert '<a href="#top">' in result

    @pytest.mark.parametrize(
        "fragment",
        [
            '<a href="https://x.com">x</a> 50%off',
            '<a href="https://x.com" target="_self">x</a>',
            f'{ULINE}<a class="href" href="https://x.com">x</a>',
        ],
    )
    def test_idempotent(self, fragment):
        once = apply_final_cleanups(fragment)
        assert apply_final_cleanups(once) == once
