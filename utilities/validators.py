from utilities.errors import ValidationError


def _present(value) -> bool:
    return bool(value and str(value).strip())


def validate_candidate(candidate) -> None:
    """Raise ValidationError naming the first missing intake field.

    Résumé and job description may come either as typed text or as text
    extracted from an uploaded file.
    """
    if not _present(candidate.name):
        raise ValidationError('name', 'Candidate name is required')
    if not (_present(candidate.resume) or _present(candidate.resume_file)):
        raise ValidationError('resume', 'Resume information is required')
    if not (_present(candidate.job_description) or _present(candidate.job_description_file)):
        raise ValidationError('job_description', 'Job description information is required')
