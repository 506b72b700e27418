"""Initech Corp DOM selectors (tabbed form)."""

TAB_BUTTON = '.tab-btn:has-text("{name}")'
QUALIFICATIONS_TAB = "Qualifications"
PREFERENCES_TAB = "Preferences"

# --- Profile tab ---
FIRST_NAME = "#i-fname"
LAST_NAME = "#i-lname"
EMAIL = "#i-email"
PHONE = "#i-phone"
LOCATION = "#i-location"
LINKEDIN = "#i-linkedin"
PORTFOLIO = "#i-portfolio"
RESUME = "#i-resume"

# --- Qualifications tab ---
EXPERIENCE = "#i-experience"
EDUCATION = "#i-education"
SCHOOL_INPUT = "#i-school"
SCHOOL_RESULTS = "#i-school-results"
SCHOOL_SPINNER = "#i-school-spinner"
SKILLS_GROUP = "#i-skills-group"

# --- Preferences tab ---
WORK_AUTH_GROUP = '.radio-group:has(input[name="workAuth"])'
VISA_BLOCK = "#i-visa-group"
VISA_GROUP = "#i-visa-group .radio-group"
START_DATE = "#i-start-date"
SALARY = "#i-salary"
REFERRAL = "#i-referral"
COVER_LETTER = "#i-cover-letter"
CONSENT = "#i-consent"

# --- Submission ---
SUBMIT = "#i-submit-btn"
SUCCESS = "#initech-success"
REFERENCE = "#initech-ref"
