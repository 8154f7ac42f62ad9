# ui/dashboard.py
import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import streamlit as st
import requests
import pandas as pd
from parsers.pdf import pdf_to_text
# -------------------- CONFIG --------------------
API_URL = os.getenv("API_URL", "http://localhost:8000")
st.set_page_config(page_title="ATS Resume Optimizer", page_icon="📄", layout="wide")
st.title("📄 ATS Resume Optimizer")

st.markdown(
    "Upload your resume and a target job description to get an ATS compatibility score, "
    "keyword and skills gap analysis, and recommendations."
)

PRIORITY_ICONS = {"High": "🔴", "Medium": "🟠", "Low": "🟢"}
STATUS_ICONS = {"passed": "✅", "warning": "⚠️", "failed": "❌"}

# -------------------- SESSION STATE --------------------
if "api_url" not in st.session_state:
    st.session_state.api_url = API_URL
if "resume" not in st.session_state:
    st.session_state.resume = None
if "job" not in st.session_state:
    st.session_state.job = None
if "last_result" not in st.session_state:
    st.session_state.last_result = None


def fetch_recent(limit: int = 5) -> list:
    try:
        r = requests.get(f"{st.session_state.api_url}/api/analyses/recent", params={"limit": limit}, timeout=30)
        return r.json() if r.status_code == 200 else []
    except requests.exceptions.RequestException:
        return []


def error_detail(r) -> str:
    try:
        return r.json().get("detail", r.text)
    except ValueError:
        return r.text


# -------------------- STATS --------------------
recent = fetch_recent()
c1, c2, c3 = st.columns(3)
c1.metric("Resumes Analyzed", len(recent))
c2.metric("Average Score", f"{round(sum(a['overall_score'] for a in recent) / len(recent)) if recent else 0}%")
c3.metric("Best Score", f"{max((a['overall_score'] for a in recent), default=0)}%")

st.markdown("### 🕘 Recent Analyses")
if not recent:
    st.caption("No analyses yet.")
for a in recent[:3]:
    # analyzed_at arrives as an ISO timestamp
    analyzed_on = str(a.get("analyzed_at", ""))[:10]
    st.markdown(f"**Analysis #{a['id'][-6:]}** · {analyzed_on} · **{a['overall_score']}%**")

# -------------------- TABS --------------------
tab1, tab2, tab3 = st.tabs(["📤 Upload Resume", "🧾 Job Description", "📊 Analysis"])

# ==================== TAB 1: Upload Resume ====================
with tab1:
    st.subheader("Upload Your Resume")

    with st.form("upload_form", clear_on_submit=False):
        resume_file = st.file_uploader("Upload Resume (PDF or DOCX, max 10MB)", type=["pdf", "docx"])
        submitted = st.form_submit_button("Upload Resume")

    if submitted:
        if not resume_file:
            st.warning("Please upload a resume first.")
        else:
            files = {"resume": (resume_file.name, resume_file, resume_file.type)}
            with st.spinner("⏳ Uploading and extracting text..."):
                try:
                    r = requests.post(f"{st.session_state.api_url}/api/resume/upload", files=files, timeout=90)
                except requests.exceptions.RequestException as e:
                    st.error(f"❌ Connection error: {e}")
                    st.stop()

            if r.status_code == 200:
                st.session_state.resume = r.json()
                st.success("✅ Resume uploaded successfully!")
            else:
                st.error(f"❌ Upload failed: {error_detail(r)}")

    resume = st.session_state.resume
    if resume:
        with st.container(border=True):
            st.markdown(f"**📄 File:** {resume['filename']} ({resume['file_size'] / 1024:.1f} KB)")
            with st.expander("View extracted text"):
                st.text(resume["original_text"])

# ==================== TAB 2: Job Description ====================
with tab2:
    st.subheader("Target Job Description")

    jd_file = st.file_uploader("📄 Upload Job Description (PDF, optional)", type=["pdf"])
    jd_prefill = ""
    if jd_file:
        with st.spinner("Extracting text from uploaded JD..."):
            jd_prefill = pdf_to_text(jd_file)
        if jd_prefill:
            st.success("✅ JD text extracted. Review it below.")
        else:
            st.error("❌ No text could be extracted from that PDF.")

    with st.form("job_form"):
        title = st.text_input("Job Title *")
        company = st.text_input("Company")
        description = st.text_area("Job Description *", value=jd_prefill, height=250)
        submitted_jd = st.form_submit_button("Save Job Description")

    if submitted_jd:
        if not title.strip() or not description.strip():
            st.warning("Job title and description are required.")
        else:
            payload = {"title": title.strip(), "company": company.strip() or None, "description": description.strip()}
            try:
                r = requests.post(f"{st.session_state.api_url}/api/job-description", json=payload, timeout=60)
            except requests.exceptions.RequestException as e:
                st.error(f"Connection error: {e}")
                st.stop()

            if r.status_code == 200:
                st.session_state.job = r.json()
                st.success("✅ Job description saved!")
            else:
                st.error(f"❌ Saving failed: {error_detail(r)}")

    job = st.session_state.job
    if job:
        st.markdown(f"**Title:** {job['title']}" + (f" at *{job['company']}*" if job.get("company") else ""))

# ==================== TAB 3: Analysis ====================
with tab3:
    st.subheader("ATS Analysis")
    ready = st.session_state.resume and st.session_state.job

    if not ready:
        st.info("Upload a resume and save a job description first.")
    elif st.button("🔍 Analyze Resume"):
        body = {"resume_id": st.session_state.resume["id"], "job_description_id": st.session_state.job["id"]}
        with st.spinner("Analyzing resume against the job description..."):
            try:
                r = requests.post(f"{st.session_state.api_url}/api/analyze", json=body, timeout=300)
            except requests.exceptions.RequestException as e:
                st.error(f"Connection error: {e}")
                st.stop()
        if r.status_code == 200:
            st.session_state.last_result = r.json()["result"]
        else:
            st.error(f"❌ Analysis failed: {error_detail(r)}")

    res = st.session_state.last_result
    if res:
        st.markdown("### 🧩 Scores")
        s1, s2, s3, s4 = st.columns(4)
        s1.metric("Overall", f"{res['overall_score']}%")
        s2.metric("Keyword Match", f"{res['keyword_match_score']}%")
        s3.metric("Format", f"{res['format_score']}%")
        s4.metric("Skills Match", f"{res['skills_match_score']}%")

        st.markdown("### 🔑 Keywords")
        k1, k2 = st.columns(2)
        with k1:
            st.markdown("**Found**")
            st.write(", ".join(res["found_keywords"]) or "—")
        with k2:
            st.markdown("**Missing**")
            st.write(", ".join(res["missing_keywords"]) or "—")

        st.markdown("### 📉 Skills Gap")
        gap_table = pd.DataFrame({
            "Category": [g["category"] for g in res["skills_gap"]],
            "Match (%)": [g["percentage"] for g in res["skills_gap"]],
            "Missing": [", ".join(g["missing"]) or "—" for g in res["skills_gap"]],
        })
        st.table(gap_table)

        st.markdown("### 💡 Recommendations")
        if not res["recommendations"]:
            st.caption("No recommendations available.")
        for priority in ("High", "Medium", "Low"):
            for rec in [x for x in res["recommendations"] if x["priority"] == priority]:
                with st.expander(f"{PRIORITY_ICONS[priority]} {rec['title']}  ·  {rec['category']}"):
                    st.markdown(rec["description"])

        st.markdown("### 🧾 Formatting Checks")
        if not res["formatting_checks"]:
            st.caption("No formatting checks available.")
        for check in res["formatting_checks"]:
            st.markdown(f"{STATUS_ICONS.get(check['status'], '')} **{check['name']}**")
            if check.get("message"):
                st.caption(check["message"])
