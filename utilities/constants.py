SYSTEM_PROMPT = (
    'You are an expert interview coach specializing in behavioral interviews '
    'using the STAR method.'
)

QUESTION_COUNT = 5
STAR_COMPONENTS = ('situation', 'task', 'action', 'result')

NO_RESUME_FILE = 'No resume file provided'
NO_JOB_DESCRIPTION_FILE = 'No job description file provided'
NO_ANSWER = 'No answer provided'

# Static bullets used in the end-of-interview summary
SUMMARY_STRENGTHS = [
    'Strong problem-solving skills',
    'Clear communication',
    'Good use of STAR method',
]
SUMMARY_IMPROVEMENTS = [
    'Add more quantifiable results',
    'Provide more specific examples',
    'Structure answers more concisely',
]

SUPPORTED_UPLOAD_EXTENSIONS = ('.txt', '.pdf', '.docx')

SESSION_TTL_SEC = 24 * 60 * 60  # 1 day of inactivity
