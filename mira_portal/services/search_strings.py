"""
MIRA Portal - Search String Generation

Builds Boolean search strings for recruiting or lead generation from the
input text of a SearchString. The AI provider writes the string when it
is configured; otherwise a keyword heuristic does.
"""

import base64
import logging
import os
import re

from flask import current_app

from mira_portal.errors import AccessDenied, ValidationError, UpstreamError
from mira_portal.extensions import db
from mira_portal.models import SearchString
from mira_portal.services.ai_client import chat_completion

logger = logging.getLogger(__name__)

# ==============================================================================
# KEYWORD HEURISTIC
# ==============================================================================

STOPWORDS = {
    'and', 'the', 'with', 'from', 'this', 'that', 'have', 'been', 'would', 'there', 'their',
    'nicht', 'eine', 'einer', 'einen', 'einem', 'ein', 'der', 'die', 'das', 'sie', 'und',
    'für', 'auf', 'ist', 'sind', 'oder', 'als', 'dann', 'nach', 'durch', 'über', 'unter',
    'about', 'above', 'after', 'again', 'against', 'all', 'any', 'are', 'because', 'before',
    'being', 'below', 'between', 'both', 'but', 'cannot', 'could', 'did', 'does', 'doing',
    'down', 'during', 'each', 'few', 'for', 'further', 'had', 'has', 'having', 'here',
    'hers', 'herself', 'him', 'himself', 'his', 'how', 'into', 'its', 'itself', 'more',
    'most', 'myself', 'nor', 'not', 'off', 'once', 'only', 'other', 'ought', 'our', 'ours',
    'ourselves', 'out', 'over', 'own', 'same', 'she', 'should', 'some', 'such', 'than',
    'theirs', 'them', 'themselves', 'then', 'these', 'they', 'those', 'through', 'too',
    'under', 'until', 'very', 'was', 'were', 'what', 'when', 'where', 'which', 'while',
    'who', 'whom', 'why', 'will', 'you', 'your', 'yours', 'yourself', 'yourselves',
}

SKILL_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'java\b', r'javascript', r'python', r'c\+\+', r'react', r'node\.?js', r'aws', r'docker',
    r'kubernetes', r'sql', r'php', r'typescript', r'angular', r'vue', r'golang', r'ruby',
    r'rust', r'scala', r'swift', r'kotlin', r'flutter', r'azure', r'gcp', r'terraform',
    r'jenkins', r'git', r'jira', r'agile', r'scrum', r'devops', r'machine\s?learning',
    r'data\s?science', r'spark', r'tableau', r'excel', r'sap', r'erp', r'crm',
    r'salesforce', r'oracle', r'postgresql', r'redis', r'cloud', r'saas', r'linux',
    r'graphql', r'api', r'microservice', r'bachelor', r'master', r'phd', r'certification',
)]

TITLE_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'developer', r'engineer', r'programmer', r'architect', r'analyst', r'consultant',
    r'manager', r'director', r'chief', r'cto', r'cio', r'ceo', r'cfo', r'founder',
    r'owner', r'specialist', r'technician', r'administrator', r'support', r'sales',
    r'marketing', r'product', r'project', r'recruiter', r'talent', r'finance',
    r'accounting', r'executive', r'assistant', r'associate', r'lead', r'senior',
    r'junior', r'intern', r'trainee', r'designer', r'scientist', r'buchhalter',
    r'finanz', r'steuer',
)]

LOCATION_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'berlin', r'münchen', r'muenchen', r'hamburg', r'köln', r'koeln', r'frankfurt',
    r'stuttgart', r'düsseldorf', r'duesseldorf', r'dortmund', r'essen', r'bremen',
    r'leipzig', r'dresden', r'hannover', r'nürnberg', r'nuernberg', r'new\s?york',
    r'london', r'paris', r'remote',
)]

RECRUITING_SUFFIX = ' AND ("resume" OR "CV" OR "curriculum vitae")'
LEAD_GENERATION_SUFFIX = (' AND ("CEO" OR "CTO" OR "CIO" OR "CFO" OR "Director" OR "VP" '
                          'OR "Vice President" OR "Head of" OR "Manager")')


def _unique_words(text):
    seen = {}
    for word in re.split(r'[\s,.;:]+', text or ''):
        if len(word) > 3 and word.lower() not in seen:
            seen[word.lower()] = word
    return [word for key, word in seen.items() if key not in STOPWORDS]


def _matches(word, patterns):
    return any(pattern.search(word) for pattern in patterns)


def _or_group(words):
    if not words:
        return None
    return f'({" OR ".join(words)})' if len(words) > 1 else words[0]


def build_basic_search_string(text, search_type='recruiting'):
    """Boolean search string from the keywords of text."""
    skills, titles, locations, others = [], [], [], []
    for word in _unique_words(text):
        if _matches(word, SKILL_PATTERNS):
            skills.append(word)
        elif _matches(word, TITLE_PATTERNS):
            titles.append(word)
        elif _matches(word, LOCATION_PATTERNS):
            locations.append(word)
        else:
            others.append(word)

    skills, titles, locations, others = skills[:10], titles[:5], locations[:3], others[:10]

    if search_type == 'recruiting':
        groups = [_or_group(titles), _or_group(locations), _or_group(skills)]
        suffix = RECRUITING_SUFFIX
    else:
        groups = [_or_group(skills), _or_group(locations)]
        suffix = LEAD_GENERATION_SUFFIX

    parts = [group for group in groups if group]
    if others and len(parts) < 2:
        parts.append(_or_group(others))

    return ' AND '.join(parts) + suffix


# ==============================================================================
# GENERATION
# ==============================================================================

GENERATION_PROMPTS = {
    'recruiting': ('You create Boolean search strings for recruiters. Combine job titles, '
                   'locations and skills with AND, synonyms with OR, and quote multi-word terms. '
                   'Return only the search string.'),
    'lead_generation': ('You create Boolean search strings for B2B lead generation. Combine '
                        'industry terms, locations and decision-maker titles with AND, synonyms '
                        'with OR, and quote multi-word terms. Return only the search string.'),
}


def generate_search_string(record):
    """
    Fills generated_string of a SearchString and marks it completed.

    Records without input text are marked failed.
    """
    if not record.input_text:
        record.status = 'failed'
        db.session.commit()
        logger.warning('Search string %s has no input text', record.id)
        return record

    search_type = record.type if record.type in SearchString.TYPES else 'recruiting'
    try:
        generated = chat_completion(
            messages=[
                {'role': 'system', 'content': GENERATION_PROMPTS[search_type]},
                {'role': 'user', 'content': record.input_text[:12000]},
            ],
            temperature=0.3,
            max_tokens=500,
        )
    except UpstreamError as e:
        logger.info('AI generation unavailable for search string %s (%s), using keyword heuristic',
                    record.id, e)
        generated = build_basic_search_string(record.input_text, search_type)

    record.generated_string = generated
    record.status = 'completed'
    db.session.commit()
    return record


# ==============================================================================
# PDF INPUT
# ==============================================================================

PDF_EXTRACTION_PROMPT = ('Extract all the relevant text from this PDF document. Focus on information '
                         'that would be useful for creating a search string for recruiting or lead '
                         'generation.')


def resolve_upload_path(pdf_path):
    """Absolute path of an uploaded file, refusing paths outside the upload folder."""
    folder = os.path.realpath(current_app.config['UPLOAD_FOLDER'])
    full_path = os.path.realpath(os.path.join(folder, pdf_path))
    if os.path.commonpath([folder, full_path]) != folder:
        raise ValidationError('Invalid PDF path')
    if not os.path.isfile(full_path):
        raise ValidationError(f'PDF not found: {pdf_path}')
    return full_path


def extract_pdf_text(pdf_path):
    """Asks the AI provider for the text of an uploaded PDF."""
    with open(resolve_upload_path(pdf_path), 'rb') as f:
        content = base64.b64encode(f.read()).decode('utf-8')

    return chat_completion(
        messages=[
            {'role': 'system', 'content': 'You are a helpful assistant that extracts text from PDFs.'},
            {'role': 'user', 'content': [
                {'type': 'text', 'text': PDF_EXTRACTION_PROMPT},
                {'type': 'image_url', 'image_url': {'url': f'data:application/pdf;base64,{content}'}},
            ]},
        ],
        model=current_app.config.get('OPENAI_PDF_MODEL'),
        temperature=0.3,
        max_tokens=4000,
    )


def process_pdf(pdf_path, search_string_id, auth):
    """
    Extracts the PDF text into a search string and generates it.

    Only the owner of the search string, or an admin, may overwrite it.

    Returns:
        {success, extracted_text, record}
    """
    if not pdf_path:
        raise ValidationError('PDF path is required')

    record = db.session.get(SearchString, search_string_id) if search_string_id else None
    if record is None:
        raise ValidationError(f'Search string not found: {search_string_id}')

    if record.user_id != getattr(auth.user, 'id', None) and not (auth.is_admin or auth.is_superadmin):
        raise AccessDenied('Unauthorized: search string belongs to another user')

    logger.info('Processing PDF from path: %s', pdf_path)
    extracted_text = extract_pdf_text(pdf_path)

    record.pdf_path = pdf_path
    record.input_source = 'pdf'
    record.input_text = extracted_text
    record.status = 'processing'
    db.session.commit()

    generate_search_string(record)

    return {
        'success': True,
        'extracted_text': extracted_text,
        'record': record.to_dict(),
    }
