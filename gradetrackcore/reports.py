# gradetrackcore/reports.py
"""PDF layouts for the full GPA report and the single-semester report."""
from datetime import datetime
from html import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from . import grading

BRAND_COLOR = colors.HexColor("#007bff")
FOOTER_TEXT = (
    "This is an automatically generated report. "
    "For official records, please contact the registrar."
)


def _fmt_points(value):
    return f"{float(value):g}"


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        alignment=1,
        fontSize=22,
        textColor=BRAND_COLOR,
        spaceAfter=8,
    ))
    styles.add(ParagraphStyle(
        "Info",
        parent=styles["Normal"],
        fontSize=11,
        textColor=colors.HexColor("#333333"),
        spaceAfter=4,
        leftIndent=10,
    ))
    styles.add(ParagraphStyle(
        "Analysis",
        parent=styles["Normal"],
        fontSize=12,
        textColor=BRAND_COLOR,
        spaceAfter=6,
        leftIndent=10,
    ))
    styles.add(ParagraphStyle(
        "Footer",
        parent=styles["Normal"],
        alignment=1,
        fontSize=9,
        textColor=colors.HexColor("#888888"),
    ))
    return styles


def courses_table(courses, scale):
    table_data = [["Course", "Grade", "Credits", "Points"]]
    for c in courses:
        table_data.append([
            c.name, c.grade, c.credits,
            _fmt_points(grading.weighted_points(c.grade, c.credits, scale)),
        ])
    t = Table(table_data, repeatRows=1, hAlign="CENTER", colWidths=[240, 60, 60, 60])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("GRID", (0, 0), (-1, -1), 0.7, colors.HexColor("#cccccc")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.lightgrey]),
    ]))
    return t


def _footer(story, styles):
    story.append(Spacer(1, 18))
    story.append(Paragraph(FOOTER_TEXT, styles["Footer"]))
    story.append(Paragraph(
        f"Generated by GradeTrack | {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        styles["Footer"],
    ))


def _document(out):
    return SimpleDocTemplate(
        out, pagesize=A4, rightMargin=40, leftMargin=40, topMargin=40, bottomMargin=40,
    )


def build_full_report(out, student, semesters, scale=None):
    """
    Write the full report to ``out`` (any file-like object, e.g. an HttpResponse).

    ``semesters`` must be ordered oldest first with courses prefetched.
    """
    scale = scale or grading.active_scale()
    styles = _styles()
    story = []

    per_semester = [(sem, list(sem.courses.all())) for sem in semesters]
    overall = grading.cgpa([courses for _, courses in per_semester], scale)
    total_courses = sum(len(courses) for _, courses in per_semester)
    total_credits = sum(c.credits for _, courses in per_semester for c in courses)

    story.append(Paragraph("GPA Report", styles["ReportTitle"]))
    story.append(Spacer(1, 6))

    story.append(Paragraph("<b>Student Information</b>", styles["Heading2"]))
    story.append(Paragraph(f"<b>Name:</b> {escape(student.name)}", styles["Info"]))
    story.append(Paragraph(f"<b>Email:</b> {escape(student.email)}", styles["Info"]))
    story.append(Spacer(1, 8))

    story.append(Paragraph("<b>Academic Summary</b>", styles["Heading2"]))
    for line in (
        f"Cumulative GPA (CGPA): {overall:.2f}",
        f"Total Semesters: {len(per_semester)}",
        f"Total Courses: {total_courses}",
        f"Total Credits: {total_credits}",
    ):
        story.append(Paragraph(line, styles["Analysis"]))
    story.append(Spacer(1, 10))

    for sem, courses in per_semester:
        story.append(Paragraph(f"<b>{sem}</b>", styles["Heading3"]))
        story.append(Paragraph(
            f"Semester GPA: {grading.semester_gpa(courses, scale):.2f}", styles["Info"],
        ))
        if courses:
            story.append(courses_table(courses, scale))
        else:
            story.append(Paragraph("No courses recorded.", styles["Info"]))
        story.append(Spacer(1, 8))

    _footer(story, styles)
    _document(out).build(story)


def build_semester_report(out, student, semester, scale=None):
    scale = scale or grading.active_scale()
    styles = _styles()
    story = []
    courses = list(semester.courses.all())
    total_credits = sum(c.credits for c in courses)
    total_points = sum(
        (grading.weighted_points(c.grade, c.credits, scale) for c in courses), 0,
    )

    story.append(Paragraph(
        f"{semester.semester_type} {semester.year} - Semester Report", styles["ReportTitle"],
    ))
    story.append(Paragraph(f"Student: {escape(student.name)}", styles["Info"]))
    story.append(Paragraph(
        f"Generated: {datetime.now().strftime('%Y-%m-%d')}", styles["Info"],
    ))
    story.append(Spacer(1, 10))

    story.append(Paragraph("<b>Semester GPA</b>", styles["Heading2"]))
    story.append(Paragraph(
        f"{grading.semester_gpa(courses, scale):.2f}", styles["Analysis"],
    ))
    story.append(Spacer(1, 8))

    story.append(Paragraph("<b>Courses</b>", styles["Heading2"]))
    if courses:
        story.append(courses_table(courses, scale))
    else:
        story.append(Paragraph("No courses recorded.", styles["Info"]))
    story.append(Spacer(1, 8))
    story.append(Paragraph(f"Total Credits: {total_credits}", styles["Info"]))
    story.append(Paragraph(f"Total Grade Points: {_fmt_points(total_points)}", styles["Info"]))

    _footer(story, styles)
    _document(out).build(story)
