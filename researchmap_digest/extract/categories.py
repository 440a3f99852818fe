"""Per-category recipes that turn researchmap records into display fields."""

from __future__ import annotations

import re
from typing import Any, Sequence

from ..language_utils import resolve_lang, resolve_lang_strict
from ..text_utils import clean_text, join_non_empty
from .links import pick_link
from .models import Category, ExtractionResult, ExtractionSettings
from .scoring import STRICT_PATH_HINTS, score_by_path, score_by_value, score_whole_record
from .years import pick_year_range, start_year_sort_key

PAPER_VENUE_FIELDS = (
    "journal",
    "journal_name",
    "journal_title",
    "publication_name",
    "published_in",
    "container_title",
    "source",
    "publisher",
    "proceedings",
    "conference",
    "book_title",
)
MISC_VENUE_FIELDS = (
    "journal",
    "journal_name",
    "journal_title",
    "publication_name",
    "published_in",
    "source",
    "publisher",
    "magazine",
    "book_title",
    "proceedings",
    "conference",
)
PRESENTATION_VENUE_FIELDS = (
    "conference",
    "conference_name",
    "conference_title",
    "meeting",
    "meeting_name",
    "meeting_title",
    "event",
    "event_name",
    "event_title",
    "society",
    "society_name",
    "organization",
    "organization_name",
    "venue",
    "place",
    "proceedings",
    "publisher",
)

CATEGORIES: tuple[Category, ...] = (
    Category("research_interests", "Research Interests / Keywords"),
    Category("research_experience", "Research Experience"),
    Category("education", "Education"),
    Category("committee_memberships", "Committee Memberships"),
    Category("awards", "Awards"),
    Category("published_papers", "Published Papers", PAPER_VENUE_FIELDS, has_links=True),
    Category("misc", "MISC", MISC_VENUE_FIELDS),
    Category("books_etc", "Books and Other Publications"),
    Category("presentations", "Presentations", PRESENTATION_VENUE_FIELDS),
    Category("teaching_experience", "Teaching Experience"),
    Category("association_memberships", "Professional Memberships"),
    Category("works", "Works"),
    Category("industrial_property_rights", "Industrial Property Rights"),
    Category("social_contribution", "Social Contribution"),
    Category("media_coverage", "Media Coverage"),
    Category("academic_contribution", "Academic Contribution"),
    Category("others", "Others"),
)
CATEGORIES_BY_KEY = {category.key: category for category in CATEGORIES}

INTEREST_FIELDS = (
    "research_interest",
    "keyword",
    "research_keyword",
    "research_interests",
    "name",
    "title",
)
ORGANIZATION_FIELDS = (
    "affiliation",
    "institution",
    "organization",
    "workplace",
    "employer",
    "university",
    "company",
    "school",
)
UNIT_FIELDS = ("graduate_school", "faculty", "college", "department", "division", "section")
POSITION_FIELDS = ("position", "job", "role", "occupation", "title")
DEGREE_FIELDS = ("degree", "education_level", "qualification", "status", "completion")
COURSE_FIELDS = ("course_name", "course", "subject", "class_name", "name", "title")
TEACHING_ORG_FIELDS = ("affiliation", "institution", "organization", "university", "school")
ASSOCIATION_FIELDS = ("association", "organization", "society", "name", "title")
ACTIVITY_FIELDS = ("activity", "contribution", "role", "name", "title", "description", "summary")
ACTIVITY_ORG_FIELDS = ("organization", "institution", "affiliation")
GENERIC_TITLE_FIELDS = (
    "title",
    "name",
    "paper_title",
    "book_title",
    "presentation_title",
    "work_title",
    "project_title",
    "activity_title",
    "subject",
    "description",
    "summary",
)

SCHOOL_FIELDS = (
    "university",
    "school",
    "institution",
    "affiliation",
    "organization",
    "school_name",
    "university_name",
    "institution_name",
)
GRADUATE_FIELDS = (
    "graduate_school",
    "graduate",
    "school_of",
    "graduate_school_name",
    "grad_school",
    "gradschool",
)
FACULTY_FIELDS = ("faculty", "college", "division", "faculty_name", "college_name", "division_name")

UNIVERSITY_RE = re.compile(r"\bUniversity\b", re.IGNORECASE | re.ASCII)
GRADUATE_SCHOOL_RE = re.compile(r"\bGraduate School\b", re.IGNORECASE | re.ASCII)
FACULTY_WORD_RE = re.compile(r"\bFaculty\b", re.IGNORECASE | re.ASCII)
DEPARTMENT_PREFIX_RE = re.compile(r"^Department of\b", re.IGNORECASE | re.ASCII)
FACULTY_PREFIX_RE = re.compile(r"^Faculty of\b", re.IGNORECASE | re.ASCII)
COLLEGE_PREFIX_RE = re.compile(r"^College of\b", re.IGNORECASE | re.ASCII)


class RecordExtractor:
    """Extracts title, venue, year and link from records of a known category."""

    def __init__(self, settings: ExtractionSettings | None = None) -> None:
        self.settings = settings or ExtractionSettings()

    # -- Field access ---------------------------------------------------

    def get(self, record: Any, key: str) -> str:
        if not isinstance(record, dict) or key not in record:
            return ""
        return resolve_lang(record[key], self.settings.lang, self.settings.fallback_langs)

    def get_strict(self, record: Any, key: str) -> str:
        if not isinstance(record, dict) or key not in record:
            return ""
        return resolve_lang_strict(
            record[key], self.settings.lang, self.settings.disallowed_script_ranges
        )

    def prefer(self, record: Any, keys: Sequence[str], *, strict: bool = False) -> str:
        getter = self.get_strict if strict else self.get
        for key in keys:
            text = getter(record, key)
            if text:
                return text
        return ""

    def _strict_text(self, text: str) -> str:
        return resolve_lang_strict(text, self.settings.lang, self.settings.disallowed_script_ranges)

    # -- Education ------------------------------------------------------

    def education_school(self, record: Any) -> str:
        direct = self.prefer(record, SCHOOL_FIELDS)
        if direct:
            return direct
        by_value = score_by_value(
            record,
            [UNIVERSITY_RE],
            exclude=[DEPARTMENT_PREFIX_RE, GRADUATE_SCHOOL_RE, FACULTY_WORD_RE, COLLEGE_PREFIX_RE],
        )
        if by_value:
            return by_value
        return score_by_path(
            record,
            ("university", "institution", "school", "organization"),
            exclude=[DEPARTMENT_PREFIX_RE],
        )

    def education_graduate_school(self, record: Any) -> str:
        direct = self.prefer(record, GRADUATE_FIELDS)
        if direct and GRADUATE_SCHOOL_RE.search(direct):
            return direct
        unit_prefixes = [DEPARTMENT_PREFIX_RE, FACULTY_PREFIX_RE, COLLEGE_PREFIX_RE]
        by_value = score_by_value(record, [GRADUATE_SCHOOL_RE], exclude=unit_prefixes)
        if by_value:
            return by_value
        return score_by_path(
            record,
            ("graduate", "grad", "graduate_school", "gradschool"),
            require=[GRADUATE_SCHOOL_RE],
            exclude=unit_prefixes,
        )

    def education_faculty(self, record: Any) -> str:
        direct = self.prefer(record, FACULTY_FIELDS)
        if direct and not GRADUATE_SCHOOL_RE.search(direct) and not DEPARTMENT_PREFIX_RE.search(direct):
            return direct
        not_faculty = [DEPARTMENT_PREFIX_RE, GRADUATE_SCHOOL_RE]
        by_prefix = score_by_value(record, [FACULTY_PREFIX_RE, COLLEGE_PREFIX_RE], exclude=not_faculty)
        if by_prefix:
            return by_prefix
        by_word = score_by_value(record, [FACULTY_WORD_RE], exclude=not_faculty)
        if by_word:
            return by_word
        return score_by_path(record, ("faculty", "college", "division"), exclude=not_faculty)

    def education_department(self, record: Any) -> str:
        return score_by_value(record, [DEPARTMENT_PREFIX_RE])

    def education_units(self, record: Any) -> tuple[str, str, str, str]:
        """Return (school, graduate school, faculty, department) with duplicates dropped."""
        school = self.education_school(record)
        graduate = self.education_graduate_school(record)
        faculty = self.education_faculty(record)
        department = self.education_department(record)
        if graduate and faculty and clean_text(graduate) == clean_text(faculty):
            faculty = ""
        return school, graduate, faculty, department

    def degree(self, record: Any) -> str:
        return clean_text(self.prefer(record, DEGREE_FIELDS))

    # -- Titles ---------------------------------------------------------

    def _whole_record(self, record: Any) -> str:
        return score_whole_record(record) or self.settings.no_title

    def title(self, category: Category | str, record: Any) -> str:
        key = category.key if isinstance(category, Category) else category

        if key == "research_interests":
            text = self.prefer(record, INTEREST_FIELDS, strict=True)
            if text:
                return text
            return (
                score_whole_record(record, STRICT_PATH_HINTS, text_filter=self._strict_text)
                or self.settings.no_title
            )

        if key == "research_experience":
            organization = self.prefer(record, ORGANIZATION_FIELDS)
            unit = self.prefer(record, UNIT_FIELDS)
            position = self.prefer(record, POSITION_FIELDS)
            return clean_text(join_non_empty([organization, unit, position]) or self._whole_record(record))

        if key == "education":
            parts = [*self.education_units(record), self.degree(record)]
            return clean_text(join_non_empty(parts) or self._whole_record(record))

        if key == "teaching_experience":
            course = self.prefer(record, COURSE_FIELDS)
            organization = self.prefer(record, TEACHING_ORG_FIELDS)
            return clean_text(join_non_empty([course, organization]) or self._whole_record(record))

        if key == "association_memberships":
            return clean_text(self.prefer(record, ASSOCIATION_FIELDS) or self._whole_record(record))

        if key == "academic_contribution":
            activity = self.prefer(record, ACTIVITY_FIELDS)
            organization = self.prefer(record, ACTIVITY_ORG_FIELDS)
            return clean_text(join_non_empty([activity, organization]) or self._whole_record(record))

        return clean_text(self.prefer(record, GENERIC_TITLE_FIELDS) or self._whole_record(record))

    # -- Other fields ---------------------------------------------------

    def venue(self, category: Category, record: Any) -> str:
        if not category.venue_fields:
            return ""
        return clean_text(self.prefer(record, category.venue_fields))

    def year(self, record: Any) -> str:
        return clean_text(pick_year_range(record, self.get))

    def start_year(self, record: Any) -> int:
        return start_year_sort_key(record, self.get)

    def link(self, category: Category, record: Any) -> str:
        if not category.has_links:
            return ""
        return pick_link(record, self.settings.forbidden_hosts)

    def extract(self, category: Category, record: Any) -> ExtractionResult:
        return ExtractionResult(
            title=self.title(category, record),
            venue=self.venue(category, record),
            year=self.year(record),
            link=self.link(category, record),
        )
