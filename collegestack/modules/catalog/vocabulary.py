"""
Fixed tag vocabulary of the forum.

A post has no explicit course/semester/subject fields: they are inferred by
intersecting its tag names with the vocabularies below.
"""
from typing import Dict, List, Optional, Sequence

ALL_COURSES = "All Courses"
ALL_SEMESTERS = "All Semesters"
ALL_SUBJECTS = "All Subjects"
MISCELLANEOUS = "Miscellaneous"

COURSE_CODES = ["CSE", "IT", "BIOTECH", "ECE", "BBA"]

SEMESTER_LABELS = [f"Semester {n}" for n in range(1, 9)]

# Semester buckets in display order
SEMESTER_BUCKETS = SEMESTER_LABELS + [MISCELLANEOUS]

GENERAL_CATEGORIES = [
    "Academic",
    "Events",
    "Campus Life",
    "Questions",
    "Discussion",
    "Announcement",
    "Help Wanted",
    "Resources",
    "Student Activities",
    "Faculty",
]

_SHARED_CS_SUBJECTS = {
    "Semester 1": ["C Programming", "Physics-1"],
    "Semester 2": ["Physics-2", "OOPS"],
    "Semester 3": ["Electrical Science", "DBMS"],
    "Semester 4": ["Digital Systems", "EVS"],
    "Semester 5": ["Operating System", "COA"],
    "Semester 6": ["Blockchain", "Computer Networks"],
    "Semester 7": ["Graph Theory", "Political Philosophy"],
    "Semester 8": ["Astrophysics", "Agile Methodology"],
}

SUBJECTS_DATA: Dict[str, Dict[str, List[str]]] = {
    "CSE": dict(_SHARED_CS_SUBJECTS),
    "IT": dict(_SHARED_CS_SUBJECTS),
    "BIOTECH": {
        "Semester 1": ["Biology Fundamentals", "Chemistry-1"],
        "Semester 2": ["Chemistry-2", "Cell Biology"],
        "Semester 3": ["Biochemistry", "Microbiology"],
        "Semester 4": ["Genetics", "Molecular Biology"],
        "Semester 5": ["Immunology", "Bioprocess Engineering"],
        "Semester 6": ["Bioinformatics", "Genomics"],
        "Semester 7": ["Tissue Engineering", "Bioethics"],
        "Semester 8": ["Pharmaceutical Biotechnology", "Biosafety"],
    },
    "ECE": {
        "Semester 1": ["Basic Electronics", "Physics-1"],
        "Semester 2": ["Physics-2", "Circuit Theory"],
        "Semester 3": ["Analog Electronics", "Digital Electronics"],
        "Semester 4": ["Microprocessors", "Signals and Systems"],
        "Semester 5": ["Communication Systems", "Control Systems"],
        "Semester 6": ["VLSI Design", "Embedded Systems"],
        "Semester 7": ["Wireless Communication", "Antenna Theory"],
        "Semester 8": ["IoT Systems", "Robotics"],
    },
    "BBA": {
        "Semester 1": ["Principles of Management", "Business Economics"],
        "Semester 2": ["Financial Accounting", "Business Communication"],
        "Semester 3": ["Marketing Management", "Organizational Behavior"],
        "Semester 4": ["Business Law", "Human Resource Management"],
        "Semester 5": ["Operations Management", "Financial Management"],
        "Semester 6": ["Strategic Management", "International Business"],
        "Semester 7": ["Entrepreneurship", "Business Ethics"],
        "Semester 8": ["Project Management", "Digital Marketing"],
    },
}


def is_structural(tag: str, courses: Optional[Sequence[str]] = None) -> bool:
    """Tags that can never be a subject label"""
    return (
        tag in (COURSE_CODES if courses is None else courses)
        or tag in SEMESTER_LABELS
        or tag == MISCELLANEOUS
        or tag in GENERAL_CATEGORIES
    )


def all_subjects() -> List[str]:
    subjects = set()
    for semesters in SUBJECTS_DATA.values():
        for names in semesters.values():
            subjects.update(names)
    return sorted(subjects)


def static_subjects_for(course: str, semester: str) -> List[str]:
    if not course or course == ALL_COURSES or not semester or semester == ALL_SEMESTERS:
        return []
    return list(SUBJECTS_DATA.get(course, {}).get(semester, []))


def default_tag_names() -> List[str]:
    """Everything seeded into an empty tags table, without duplicates"""
    names: List[str] = []
    for name in GENERAL_CATEGORIES + SEMESTER_BUCKETS + COURSE_CODES + all_subjects():
        if name not in names:
            names.append(name)
    return names
