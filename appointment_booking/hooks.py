app_name = "appointment_booking"
app_title = "Appointment Booking"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Businesses, services and appointment booking with slot availability"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Apps
# ------------------

required_apps = ["frappe"]

# Installation
# ------------

# before_install = "appointment_booking.install.before_install"
# after_install = "appointment_booking.install.after_install"

# Document Events
# ---------------

# doc_events = {}

# Scheduled Tasks
# ---------------

# scheduler_events = {}

# Testing
# -------

# before_tests = "appointment_booking.install.before_tests"
