import streamlit as st
from datetime import date, datetime

# Import core modules
from medrem.config import load_config
from medrem.frequency import FREQUENCY_LABELS, CUSTOM_FREQUENCY
from medrem.reminder_system import ReminderStore, expand_reminders
from medrem.notifications import NotificationPermission, LocalNotifier
from medrem.whatsapp import WhatsAppClient
from medrem.dispatcher import DeliveryDispatcher
from medrem.validation import validate_prescription_form
from medrem.views import (
    today_reminders,
    week_view,
    shift_week,
    upcoming_reminders,
    medicine_summaries,
    reminders_to_dataframe,
)
from medrem.ocr import prefill_from_image
from medrem.drug_info import get_drug_info
from medrem.exceptions import ReminderValidationError
from ui import THEME_CONFIG

# Page configuration
st.set_page_config(
    page_title="Medicine Reminder",
    page_icon="💊",
    layout="wide",
    initial_sidebar_state="expanded"
)

FORM_DEFAULTS = {
    "medicine_name": "",
    "dosage": "",
    "frequency": "",
    "duration": "",
    "phone_number": "",
}


@st.cache_data
def load_css():
    return f"""
    .main {{ font-family: {THEME_CONFIG['font_family']}; }}
    .reminder-card {{
        background: white; padding: 1rem; border-radius: 10px;
        border: 1px solid #e5e7eb; margin-bottom: 0.5rem;
    }}
    .reminder-taken {{ border-left: 4px solid {THEME_CONFIG['success_color']}; }}
    .reminder-pending {{ border-left: 4px solid {THEME_CONFIG['primary_color']}; }}
    .today-column {{ background: #eff6ff; border-radius: 8px; padding: 0.25rem; }}
    """


@st.cache_resource
def get_config():
    return load_config()


# Initialize session state
if 'reminder_store' not in st.session_state:
    st.session_state.reminder_store = ReminderStore()
if 'notification_permission' not in st.session_state:
    permission = NotificationPermission()
    permission.request()
    st.session_state.notification_permission = permission
if 'dispatcher' not in st.session_state:
    config = get_config()
    st.session_state.dispatcher = DeliveryDispatcher(
        notifier=LocalNotifier(st.session_state.notification_permission),
        whatsapp=WhatsAppClient(config.relay),
    )
if 'form' not in st.session_state:
    st.session_state.form = dict(FORM_DEFAULTS, start_date=date.today())
if 'custom_times' not in st.session_state:
    st.session_state.custom_times = ["09:00"]
if 'week_anchor' not in st.session_state:
    st.session_state.week_anchor = date.today()
if 'flash' not in st.session_state:
    st.session_state.flash = None


def mark_taken(reminder_id):
    st.session_state.reminder_store.mark_taken(reminder_id)


def show_flash():
    flash = st.session_state.flash
    if not flash:
        return
    kind, message = flash
    if kind == "success":
        st.success(message)
    else:
        st.error(message)
    st.session_state.flash = None


def main():
    st.markdown(f"<style>{load_css()}</style>", unsafe_allow_html=True)

    # Sidebar navigation
    with st.sidebar:
        st.markdown("## 💊 Medicine Reminder")
        st.markdown("---")

        page = st.radio(
            "Navigate",
            ["🏠 Dashboard", "📅 Calendar", "🔔 Notifications", "💊 Medicines", "📄 Exports"],
        )

        st.markdown("---")
        permission = st.session_state.notification_permission
        alerts_on = st.toggle("Desktop alerts", value=permission.is_granted())
        if alerts_on and not permission.is_granted():
            permission.grant()
        elif not alerts_on and permission.is_granted():
            permission.revoke()

        failed = st.session_state.dispatcher.failed_deliveries()
        if failed:
            st.caption(f"⚠️ {len(failed)} deliveries failed")

        st.markdown("---")
        st.markdown("### ⚠️ Medical Disclaimer")
        st.caption("This tool is a reminder aid only. Always follow your doctor's instructions.")

    # Page routing
    if page == "🏠 Dashboard":
        show_dashboard_page()
    elif page == "📅 Calendar":
        show_calendar_page()
    elif page == "🔔 Notifications":
        show_notifications_page()
    elif page == "💊 Medicines":
        show_medicines_page()
    elif page == "📄 Exports":
        show_exports_page()


def show_dashboard_page():
    st.title("Dashboard")
    st.caption("Upload and manage your prescriptions")
    show_flash()

    col1, col2 = st.columns(2)

    with col1:
        show_upload_section()
        show_prescription_form()

    with col2:
        show_todays_reminders()


def show_upload_section():
    st.subheader("Upload Prescription")
    uploaded_file = st.file_uploader(
        "Drag and drop your prescription here",
        type=['png', 'jpg', 'jpeg'],
        help="A clear photo of the prescription label"
    )

    if uploaded_file and st.button("🔍 Read prescription"):
        with st.spinner("Processing prescription..."):
            prefill = prefill_from_image(uploaded_file.getvalue())

        if prefill.success:
            st.session_state.form["medicine_name"] = prefill.medicine_name
            st.session_state.form["dosage"] = prefill.dosage
            st.success(prefill.message)
        else:
            st.error(prefill.message)


def show_prescription_form():
    st.subheader("Prescription Details")
    form = st.session_state.form

    frequency_options = [""] + list(FREQUENCY_LABELS)
    frequency = st.selectbox(
        "Frequency",
        frequency_options,
        index=frequency_options.index(form["frequency"]) if form["frequency"] in frequency_options else 0,
        format_func=lambda key: FREQUENCY_LABELS.get(key, "Select frequency"),
    )
    form["frequency"] = frequency

    if frequency == CUSTOM_FREQUENCY:
        show_custom_times()

    with st.form("prescription_form"):
        medicine_name = st.text_input("Medicine Name", value=form["medicine_name"])
        dosage = st.text_input("Dosage", value=form["dosage"], placeholder="e.g. 500mg")
        duration = st.text_input("Duration (days)", value=form["duration"])
        start_date = st.date_input("Start Date", value=form["start_date"])
        phone_number = st.text_input("WhatsApp Number", value=form["phone_number"], placeholder="+15551234567")
        submitted = st.form_submit_button("Save Prescription", type="primary")

    if not submitted:
        return

    form.update(
        medicine_name=medicine_name,
        dosage=dosage,
        duration=duration,
        start_date=start_date,
        phone_number=phone_number,
    )
    submit_prescription(form)


def show_custom_times():
    times = st.session_state.custom_times
    st.markdown("**Reminder times**")

    for i, value in enumerate(list(times)):
        c1, c2 = st.columns([4, 1])
        with c1:
            picked = st.time_input(
                f"Time {i + 1}",
                value=datetime.strptime(value, "%H:%M").time(),
                key=f"custom_time_{i}",
            )
            times[i] = picked.strftime("%H:%M")
        with c2:
            if st.button("✖", key=f"remove_time_{i}"):
                times.pop(i)
                st.rerun()

    if st.button("➕ Add time"):
        times.append("09:00")
        st.rerun()


def submit_prescription(form):
    custom_times = st.session_state.custom_times if form["frequency"] == CUSTOM_FREQUENCY else []
    start_date = form["start_date"].strftime("%Y-%m-%d") if form["start_date"] else ""

    errors = validate_prescription_form(dict(form, start_date=start_date), custom_times)
    if errors:
        st.error("Please fill in all required fields")
        for message in errors.values():
            st.caption(f"• {message}")
        return

    try:
        reminders = expand_reminders(
            form["medicine_name"].strip(),
            form["dosage"].strip(),
            form["frequency"],
            start_date,
            form["duration"],
            custom_times,
            form["phone_number"].strip(),
        )
    except ReminderValidationError as e:
        st.error(f"Failed to save prescription: {e}")
        return

    st.session_state.reminder_store.append(reminders)
    st.session_state.dispatcher.dispatch(reminders)

    st.session_state.form = dict(FORM_DEFAULTS, start_date=date.today())
    st.session_state.custom_times = ["09:00"]
    st.session_state.flash = ("success", "Prescription saved and reminders scheduled")
    st.rerun()


def show_reminder_row(reminder, key_prefix):
    css = "reminder-taken" if reminder.taken else "reminder-pending"
    col1, col2 = st.columns([4, 2])
    with col1:
        st.markdown(
            f"<div class='reminder-card {css}'><b>{reminder.medicine}</b><br>"
            f"{reminder.dosage} • {reminder.time}</div>",
            unsafe_allow_html=True,
        )
    with col2:
        if reminder.taken:
            st.markdown("✅ Taken")
        elif st.button("Mark as taken", key=f"{key_prefix}_{reminder.id}"):
            mark_taken(reminder.id)
            st.rerun()


def show_todays_reminders():
    st.subheader("Today's Reminders")
    reminders = today_reminders(st.session_state.reminder_store.all())

    if not reminders:
        st.info("No reminders for today")
        return

    for i, reminder in enumerate(reminders):
        show_reminder_row(reminder, f"today_{i}")


def show_calendar_page():
    st.title("Calendar")
    anchor = st.session_state.week_anchor

    col1, col2, col3 = st.columns([1, 4, 1])
    with col1:
        if st.button("◀ Previous"):
            st.session_state.week_anchor = shift_week(anchor, -1)
            st.rerun()
    with col3:
        if st.button("Next ▶"):
            st.session_state.week_anchor = shift_week(anchor, 1)
            st.rerun()

    week = week_view(st.session_state.reminder_store.all(), anchor)
    with col2:
        st.markdown(f"### {week[0][0]:%B %d} - {week[-1][0]:%B %d, %Y}")

    columns = st.columns(7)
    for column, (day, reminders) in zip(columns, week):
        with column:
            label = f"**{day:%a}**  \n{day:%d}"
            if day == date.today():
                label = f"🔵 {label}"
            st.markdown(label)

            for i, reminder in enumerate(reminders):
                icon = "✅" if reminder.taken else "💊"
                st.caption(f"{icon} {reminder.medicine} {reminder.time}")
                if not reminder.taken and st.button("Take", key=f"cal_{day}_{i}_{reminder.id}"):
                    mark_taken(reminder.id)
                    st.rerun()


def show_notifications_page():
    st.title("Notifications")
    st.caption("Stay updated with your medication schedule")

    notifications = upcoming_reminders(st.session_state.reminder_store.all())
    if not notifications:
        st.success("🎉 No notifications. You're all caught up! Check back later for new reminders.")
        return

    for i, reminder in enumerate(notifications):
        col1, col2 = st.columns([5, 2])
        with col1:
            st.markdown(f"**Time to take {reminder.medicine}**")
            st.caption(f"{reminder.dosage} • {reminder.time} • {reminder.calendar_date():%B %d, %Y}")
        with col2:
            if not reminder.taken and st.button("Mark as taken", key=f"notif_{i}_{reminder.id}"):
                mark_taken(reminder.id)
                st.rerun()
        st.markdown("---")


def show_medicines_page():
    st.title("Medicines")
    st.caption("Track your medications and prescriptions")

    summaries = medicine_summaries(st.session_state.reminder_store.all())
    if not summaries:
        st.info("No medicines yet. Save a prescription on the Dashboard to get started!")
        return

    for summary in summaries:
        with st.container():
            col1, col2, col3 = st.columns([3, 3, 2])
            with col1:
                st.markdown(f"### {summary.name}")
                st.caption(summary.dosage)
            with col2:
                st.progress(summary.progress / 100)
                st.caption(f"{summary.progress:.0f}% • {summary.remaining} doses remaining • Next: {summary.next_dose}")
            with col3:
                if summary.next_dose_id and st.button("Mark next dose taken", key=f"next_{summary.name}"):
                    mark_taken(summary.next_dose_id)
                    st.rerun()

            if st.button("ℹ️ Drug information", key=f"info_{summary.name}"):
                st.session_state.selected_medicine = summary.name
            if st.session_state.get("selected_medicine") == summary.name:
                show_drug_info(summary.name)
        st.markdown("---")


def show_drug_info(medicine_name):
    with st.spinner("Looking up drug label..."):
        info = get_drug_info(medicine_name)

    if not info.found:
        st.warning("Failed to load drug information.")
    st.markdown(f"**Indications:** {info.indications_and_usage}")
    st.markdown(f"**Side Effects:** {info.adverse_reactions}")
    st.markdown(f"**Dosage Info:** {info.dosage_and_administration}")


def show_exports_page():
    st.title("Exports")

    df = reminders_to_dataframe(st.session_state.reminder_store.all())
    if df.empty:
        st.info("No reminders to export yet.")
        return

    st.dataframe(df, use_container_width=True, hide_index=True)
    st.download_button(
        "💾 Download CSV",
        df.to_csv(index=False),
        f"reminders_{datetime.now().strftime('%Y%m%d')}.csv",
        "text/csv"
    )


if __name__ == "__main__":
    main()
