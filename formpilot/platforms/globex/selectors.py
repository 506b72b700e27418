"""Globex Corp DOM selectors (accordion form)."""

# --- Accordion ---
SECTION_HEADER = '.section-header:has-text("{name}")'
SECTION_OPEN_CLASS = "open"

CONTACT_SECTION = "Contact Details"
QUALIFICATIONS_SECTION = "Qualifications"
ADDITIONAL_SECTION = "Additional Information"

# --- Contact details ---
FIRST_NAME = "#g-fname"
LAST_NAME = "#g-lname"
EMAIL = "#g-email"
PHONE = "#g-phone"
CITY = "#g-city"
LINKEDIN = "#g-linkedin"
WEBSITE = "#g-website"

# --- Qualifications ---
RESUME = "#g-resume"
EXPERIENCE = "#g-experience"
DEGREE = "#g-degree"
SCHOOL_INPUT = "#g-school"
SCHOOL_RESULTS = "#g-school-results"
SCHOOL_SPINNER = "#g-school-spinner"
SKILL_CHIPS = ".chip"
SKILL_CHIP = ".chip[data-skill={skill}]"
CHIP_SELECTED_CLASS = "selected"

# --- Additional information ---
WORK_AUTH_TOGGLE = "#g-work-auth-toggle"
VISA_BLOCK = "#g-visa-block"
VISA_TOGGLE = "#g-visa-toggle"
START_DATE = "#g-start-date"
SALARY_SLIDER = "#g-salary"
SOURCE = "#g-source"
MOTIVATION = "#g-motivation"
CONSENT = "#g-consent"

# --- Submission ---
SUBMIT = "#globex-submit"
CONFIRMATION = ".globex-confirmation"
REFERENCE = "#globex-ref"

SALARY_MIN_DEFAULT = 30000
SALARY_MAX_DEFAULT = 200000
