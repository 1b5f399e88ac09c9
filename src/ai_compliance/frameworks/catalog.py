"""
Versioned question catalogs for the three frameworks.

Stored answer snapshots are keyed by the question ids below. Changing a
question list changes the scoring surface: bump CATALOG_VERSION instead
of editing ids in place.
"""

from typing import Dict, List

from .._types import HighRiskCategory
from .schema import (
    ProhibitedQuestion,
    HighRiskCategoryInfo,
    LimitedRiskQuestion,
    PrincipleQuestion,
    UKPrinciple,
    NISTQuestion,
    NISTFunction,
)

CATALOG_VERSION = "2025.1"


# =============================================================================
# EU AI Act
# =============================================================================

PROHIBITED_QUESTIONS: List[ProhibitedQuestion] = [
    ProhibitedQuestion(
        id="subliminal",
        text="Does the system deploy subliminal techniques to materially distort behaviour in a manner that causes significant harm?",
        explanation="Systems that manipulate people below their conscious awareness",
    ),
    ProhibitedQuestion(
        id="vulnerability",
        text="Does the system exploit vulnerabilities of specific groups (age, disability) causing significant harm?",
        explanation="Systems targeting vulnerable populations like children or persons with disabilities",
    ),
    ProhibitedQuestion(
        id="social_scoring",
        text="Does the system perform social scoring by public authorities leading to detrimental treatment?",
        explanation="Government systems that score citizens based on behaviour or personal characteristics",
    ),
    ProhibitedQuestion(
        id="predictive_policing",
        text="Does the system assess risk of natural persons committing criminal offences based solely on profiling?",
        explanation="Systems predicting criminal behaviour without considering actual actions",
    ),
    ProhibitedQuestion(
        id="facial_scraping",
        text="Does the system create/expand facial recognition databases through untargeted scraping?",
        explanation="Scraping facial images from internet or CCTV footage without consent",
    ),
    ProhibitedQuestion(
        id="emotion_inference",
        text="Does the system infer emotions in workplace or education settings (except medical/safety reasons)?",
        explanation="Emotion recognition AI in schools or at work (medical/safety exceptions apply)",
    ),
    ProhibitedQuestion(
        id="biometric_categorisation",
        text="Does the system perform biometric categorisation using sensitive attributes (race, political opinions, etc.)?",
        explanation="Categorizing people by race, religion, political views, sexual orientation, etc.",
    ),
    ProhibitedQuestion(
        id="realtime_biometric",
        text="Does the system perform real-time remote biometric identification in public spaces for law enforcement (except specific exceptions)?",
        explanation="Live facial recognition in public areas by police (narrow exceptions exist)",
    ),
]

HIGH_RISK_CATEGORIES: List[HighRiskCategoryInfo] = [
    HighRiskCategoryInfo(
        id=HighRiskCategory.BIOMETRIC_IDENTIFICATION,
        title="Biometric Identification & Categorisation",
        description="Systems used for biometric identification, categorisation, or emotion recognition",
        examples=[
            "Biometric identification systems",
            "Biometric categorisation systems",
            "Emotion recognition systems (limited contexts)",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.CRITICAL_INFRASTRUCTURE,
        title="Critical Infrastructure Management",
        description="AI systems managing or controlling critical infrastructure",
        examples=[
            "Transport network management",
            "Water supply management",
            "Gas and electricity distribution",
            "Road traffic management",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.EDUCATION_EMPLOYMENT,
        title="Education & Employment",
        description="Systems affecting educational or vocational training access and employment",
        examples=[
            "Admission decisions to educational institutions",
            "Student assessment and examination",
            "Recruitment and hiring decisions",
            "Promotion and termination decisions",
            "Task allocation to workers",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.ESSENTIAL_SERVICES,
        title="Essential Private & Public Services",
        description="Systems determining access to essential services and benefits",
        examples=[
            "Creditworthiness evaluation",
            "Credit scoring",
            "Emergency first response services",
            "Public benefit eligibility assessment",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.LAW_ENFORCEMENT,
        title="Law Enforcement",
        description="AI used by law enforcement authorities",
        examples=[
            "Individual risk assessment for criminal offences",
            "Polygraph and similar tools",
            "Evidence evaluation and reliability",
            "Crime analytics predicting occurrence/reoccurrence",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.MIGRATION_ASYLUM,
        title="Migration, Asylum & Border Control",
        description="Systems used for migration management",
        examples=[
            "Asylum application examination",
            "Visa application assessment",
            "Border control verification",
            "Risk assessment for illegal immigration",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.JUSTICE_DEMOCRACY,
        title="Justice & Democratic Processes",
        description="Systems used in administration of justice and democratic processes",
        examples=[
            "Legal research and interpretation",
            "Applying law to concrete facts",
            "Influencing election outcomes",
            "Influencing voting behaviour",
        ],
    ),
    HighRiskCategoryInfo(
        id=HighRiskCategory.OTHER,
        title="Other High-Risk Use",
        description="Other contexts presenting similar risks to those listed above",
        examples=[
            "Systems with equivalent risk levels",
            "Contexts added by future regulatory updates",
        ],
    ),
]

LIMITED_RISK_QUESTIONS: List[LimitedRiskQuestion] = [
    LimitedRiskQuestion(
        id="human_interaction",
        text="Does the system interact directly with people (e.g., chatbots, virtual assistants)?",
    ),
    LimitedRiskQuestion(
        id="content_generation",
        text="Does the system generate or manipulate content (e.g., deepfakes, synthetic media)?",
    ),
    LimitedRiskQuestion(
        id="biometric_emotion",
        text="Does the system perform biometric categorisation or emotion recognition (not in prohibited/high-risk contexts)?",
    ),
]


# =============================================================================
# UK AI Regulation Principles
# =============================================================================

def _questions(*texts: str) -> List[PrincipleQuestion]:
    return [PrincipleQuestion(id=f"q{i}", text=t) for i, t in enumerate(texts, start=1)]


UK_PRINCIPLES: List[UKPrinciple] = [
    UKPrinciple(
        id="safety_security_robustness",
        title="Safety, Security & Robustness",
        description="Ensures AI systems are safe, secure, and robust against failures and attacks",
        questions=_questions(
            "Have you conducted pre-deployment safety testing?",
            "Do you have ongoing monitoring for safety issues?",
            "Is there a cybersecurity assessment for this AI system?",
            "Do you have incident response procedures?",
            "Have you tested for adversarial robustness?",
        ),
    ),
    UKPrinciple(
        id="transparency_explainability",
        title="Transparency & Explainability",
        description="Ensures AI decisions can be understood and explained to stakeholders",
        questions=_questions(
            "Can you explain how the AI system makes decisions?",
            "Is there documentation of the model's limitations?",
            "Are users informed they're interacting with AI?",
            "Can you provide explanations for individual decisions?",
            "Is the training data documented?",
        ),
    ),
    UKPrinciple(
        id="fairness",
        title="Fairness",
        description="Ensures AI systems are fair and do not discriminate",
        questions=_questions(
            "Have you tested for bias across protected characteristics?",
            "Is there monitoring for discriminatory outcomes?",
            "Do you have processes to address fairness issues?",
            "Have you assessed impact on different demographic groups?",
            "Is there regular fairness auditing?",
        ),
    ),
    UKPrinciple(
        id="accountability_governance",
        title="Accountability & Governance",
        description="Ensures clear responsibility and oversight for AI systems",
        questions=_questions(
            "Is there clear assignment of responsibility for the AI system?",
            "Do you have AI governance policies?",
            "Is there senior management oversight?",
            "Are there defined risk management procedures?",
            "Do you maintain audit trails?",
        ),
    ),
    UKPrinciple(
        id="contestability_redress",
        title="Contestability & Redress",
        description="Ensures users can challenge AI decisions and seek redress",
        questions=_questions(
            "Can users challenge AI decisions?",
            "Is there a human review process for contested decisions?",
            "Do you have clear complaints procedures?",
            "Are there mechanisms for redress if harm occurs?",
            "Can users access their data used by the AI?",
        ),
    ),
]


# =============================================================================
# NIST AI RMF
# =============================================================================

NIST_FUNCTIONS: List[NISTFunction] = [
    NISTFunction(
        id="govern",
        title="Govern",
        description="Establish AI governance structure and policies",
        questions=[
            NISTQuestion(id="q1", text="Organisational AI strategy and policies", tooltip="0=none, 5=comprehensive"),
            NISTQuestion(id="q2", text="Risk management culture and leadership", tooltip="0=none, 5=embedded"),
            NISTQuestion(id="q3", text="Resource allocation for AI governance", tooltip="0=none, 5=dedicated budget"),
            NISTQuestion(id="q4", text="Third-party AI risk management", tooltip="0=none, 5=robust oversight"),
        ],
    ),
    NISTFunction(
        id="map",
        title="Map",
        description="Understand AI system context and risks",
        questions=[
            NISTQuestion(id="q1", text="AI system context and impact documentation", tooltip="0=none, 5=thorough"),
            NISTQuestion(id="q2", text="Stakeholder identification and engagement", tooltip="0=none, 5=systematic"),
            NISTQuestion(id="q3", text="Risk categorisation and prioritisation", tooltip="0=none, 5=mature process"),
            NISTQuestion(id="q4", text="Legal/regulatory requirement mapping", tooltip="0=none, 5=comprehensive"),
        ],
    ),
    NISTFunction(
        id="measure",
        title="Measure",
        description="Assess and monitor AI system performance",
        questions=[
            NISTQuestion(id="q1", text="Metrics for AI system performance", tooltip="0=none, 5=extensive"),
            NISTQuestion(id="q2", text="Testing and validation procedures", tooltip="0=none, 5=rigorous"),
            NISTQuestion(id="q3", text="Monitoring and continuous evaluation", tooltip="0=none, 5=automated"),
            NISTQuestion(id="q4", text="Impact assessment methodologies", tooltip="0=none, 5=advanced"),
        ],
    ),
    NISTFunction(
        id="manage",
        title="Manage",
        description="Respond to and mitigate AI risks",
        questions=[
            NISTQuestion(id="q1", text="Incident response capabilities", tooltip="0=none, 5=well-rehearsed"),
            NISTQuestion(id="q2", text="Risk treatment and mitigation", tooltip="0=none, 5=systematic"),
            NISTQuestion(id="q3", text="Change management for AI systems", tooltip="0=none, 5=controlled"),
            NISTQuestion(id="q4", text="Documentation and reporting", tooltip="0=none, 5=comprehensive"),
        ],
    ),
]


# Lookups
PROHIBITED_IDS: List[str] = [q.id for q in PROHIBITED_QUESTIONS]
LIMITED_RISK_IDS: List[str] = [q.id for q in LIMITED_RISK_QUESTIONS]
UK_PRINCIPLES_BY_ID: Dict[str, UKPrinciple] = {p.id: p for p in UK_PRINCIPLES}
NIST_FUNCTIONS_BY_ID: Dict[str, NISTFunction] = {f.id: f for f in NIST_FUNCTIONS}
