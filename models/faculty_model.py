from typing import Any, Dict, Optional

from fastapi import Form
from pydantic import BaseModel

# projection used by the faculty listing
LIST_FIELDS = ("name", "designation", "department", "photo")


class FacultyForm(BaseModel):
    name: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    publications: Optional[str] = None
    researchProjects: Optional[str] = None
    articlesAndJournals: Optional[str] = None
    workshops: Optional[str] = None
    coursesHandled: Optional[str] = None
    awardsReceived: Optional[str] = None

    @classmethod
    def as_form(
        cls,
        name: Optional[str] = Form(None),
        designation: Optional[str] = Form(None),
        department: Optional[str] = Form(None),
        publications: Optional[str] = Form(None),
        researchProjects: Optional[str] = Form(None),
        articlesAndJournals: Optional[str] = Form(None),
        workshops: Optional[str] = Form(None),
        coursesHandled: Optional[str] = Form(None),
        awardsReceived: Optional[str] = Form(None),
    ) -> "FacultyForm":
        return cls(
            name=name,
            designation=designation,
            department=department,
            publications=publications,
            researchProjects=researchProjects,
            articlesAndJournals=articlesAndJournals,
            workshops=workshops,
            coursesHandled=coursesHandled,
            awardsReceived=awardsReceived,
        )

    def to_document(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_none=True)


FACULTY_TEXT_FIELDS = tuple(FacultyForm.model_fields)


def serialize_faculty(faculty: Dict[str, Any]) -> Dict[str, Any]:
    faculty = dict(faculty)
    faculty["_id"] = str(faculty["_id"])
    return faculty
