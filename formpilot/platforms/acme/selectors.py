"""Acme Corp DOM selectors (4-step wizard)."""

# --- Step 1: personal information ---
FIRST_NAME = "#first-name"
LAST_NAME = "#last-name"
EMAIL = "#email"
PHONE = "#phone"
LOCATION = "#location"
LINKEDIN = "#linkedin"
PORTFOLIO = "#portfolio"

# --- Step 2: experience & education ---
RESUME = "#resume"
EXPERIENCE_LEVEL = "#experience-level"
EDUCATION = "#education"
SCHOOL_INPUT = "#school"
SCHOOL_RESULTS = "#school-dropdown"
SKILLS_GROUP = "#skills-group"

# --- Step 3: additional questions ---
WORK_AUTH_GROUP = 'div.radio-group:has(input[name="workAuth"])'
VISA_BLOCK = "#visa-sponsorship-group"
VISA_GROUP = "#visa-sponsorship-group .radio-group"
START_DATE = "#start-date"
SALARY = "#salary-expectation"
REFERRAL = "#referral"
COVER_LETTER = "#cover-letter"

# --- Step 4: review & submit ---
REVIEW_SECTION = ".review-section"
TERMS = "#terms-agree"
CONTINUE = '.active button.btn.btn-primary:has-text("Continue")'
SUBMIT = 'button[type="submit"]:has-text("Submit Application")'
SUCCESS_PAGE = "#success-page"
CONFIRMATION_ID = "#confirmation-id"
