"""Email templates for the contact and registration forms.

Render functions are pure: they take validated inputs and return an
EmailPayload. Every submitted value is HTML-escaped before interpolation.
"""

from html import escape
from typing import Mapping, Optional

from infrastructure.notifications import EmailPayload

COURSE_NAMES: dict[str, str] = {
    "web": "WebCraft Pro: Full Stack Bootcamp",
    "cyber": "Certified Cybersecurity Foundations and Practical Analyst Program (CCFPAP)",
    "data": "Data Science & Machine Learning",
    "cloud": "Cloud Computing & DevOps",
}

CONFIRMATION_SUBJECT = (
    "Confirmation of Registration - EdCatalyst Summer Internship Program"
)


def course_display_name(course: str) -> str:
    """Full course name for a course code; unknown codes are returned as given."""
    return COURSE_NAMES.get(course.strip().lower(), course)


def render_contact_message(
    *,
    sender: str,
    inbox: str,
    reply_to: str,
    name: str,
    subject: str,
    message: str,
) -> EmailPayload:
    """Build the email relaying a contact form submission to the inbox.

    Args:
        sender: From identity of the relay
        inbox: Address receiving contact messages
        reply_to: Submitter address, so replies go back to them
        name: Submitter name
        subject: Submitted subject line
        message: Submitted message body
    """
    html = f"""
<h2>New Contact Form Submission</h2>
<p><strong>Name:</strong> {escape(name)}</p>
<p><strong>Email:</strong> {escape(reply_to)}</p>
<p><strong>Subject:</strong> {escape(subject)}</p>
<p><strong>Message:</strong></p>
<p>{escape(message).replace(chr(10), "<br>")}</p>
"""
    return EmailPayload(
        sender=sender,
        to=[inbox],
        subject=f"New Contact Form Submission: {subject}",
        html=html,
        reply_to=reply_to,
    )


def render_registration_confirmation(
    recipient: str,
    inputs: Mapping[str, str],
    *,
    sender: str,
    reply_to: str,
    exam_date: Optional[str] = None,
) -> EmailPayload:
    """Build the registration confirmation for ``recipient``.

    ``inputs`` holds ``name`` and ``course`` (a course code or a full name).
    """
    name = escape(inputs["name"])
    course = escape(course_display_name(inputs["course"]))
    when = f"on {escape(exam_date)}" if exam_date else "on a date that will be announced shortly"
    contact = escape(reply_to)

    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <p>Dear {name},</p>

    <p>Thank you for registering for the EdCatalyst Summer Internship Program. We are pleased to confirm that your registration for the {course} internship has been successfully received. Please note that this registration does not guarantee final selection. The next step in the process is the Online Scholarship Examination, which will be conducted {when}. Your performance in this assessment will determine your eligibility for the internship as well as any applicable scholarship benefits.</p>

    <p>Following the examination, shortlisted candidates will receive an official selection email along with further instructions for completing the enrollment, including fee payment and document submission. We encourage you to prepare thoroughly for the exam, as it plays a crucial role in securing your place in the program.</p>

    <p>If you have any questions or require additional details regarding the exam pattern or syllabus, feel free to reach out to {contact}, our Internship Coordinator.</p>

    <p>We appreciate your interest in EdCatalyst and look forward to your participation in the upcoming examination.</p>

    <p>Warm regards,<br>
    Team EdCatalyst<br>
    www.edcatalyst.in</p>
</div>
"""
    return EmailPayload(
        sender=sender,
        to=[recipient],
        subject=CONFIRMATION_SUBJECT,
        html=html,
        reply_to=reply_to,
    )
