"""Portfolio knowledge base.

PORTFOLIO_KNOWLEDGE is rendered into the external model's system prompt.
The *_RESPONSES tuples are the canned first-person paragraphs used when the
model is skipped or fails; each keyword group picks one at random.
"""

PORTFOLIO_KNOWLEDGE = {
    "personal_info": {
        "name": "Shivam Yadav",
        "title": "Full-Stack Developer & MCA Graduate",
        "location": "Agra, Uttar Pradesh, India",
        "email": "shivamydv.work@gmail.com",
        "summary": (
            "Recent MCA graduate with 6+ months of professional internship experience "
            "in Data Science and Analytics. Full-Stack Developer skilled in React, "
            "Node.js, Python, and Machine Learning."
        ),
    },
    "experience": [
        {
            "company": "Truly Virtually",
            "role": "Frontend Developer",
            "duration": "January 2025 - June 2025",
            "skills": ["React", "JavaScript", "Frontend Development"],
            "description": "Responsive user interfaces, performance and accessibility work",
        },
        {
            "company": "YBI Foundation",
            "role": "Data Science and Machine Learning Intern",
            "duration": "June 2024 - August 2024",
            "skills": ["Python", "Machine Learning", "Data Science"],
            "description": "Data preprocessing, model development, predictive analytics",
        },
        {
            "company": "Accenture",
            "role": "Data Analytics and Visualization Intern",
            "duration": "April 2024 - May 2024",
            "skills": ["Data Analytics", "Visualization"],
            "description": "Interactive dashboards and business intelligence reporting",
        },
    ],
    "projects": [
        {
            "name": "Hotel Management System",
            "tech": ["React", "Node.js", "MongoDB", "Express.js", "JWT", "Stripe API"],
            "description": "Room booking, guest management, staff administration and billing",
            "url": "https://kutkuthotel.me/",
        },
        {
            "name": "Gesture-Controlled Media Player",
            "tech": ["React", "Python", "OpenCV", "MediaPipe", "TensorFlow"],
            "description": "Media playback controlled by hand gestures via computer vision",
            "url": "https://gesturecontroll.netlify.app/",
        },
        {
            "name": "AI Image Enhancer Platform",
            "tech": ["React", "Python", "TensorFlow", "OpenCV"],
            "description": "Automatic image quality enhancement and super-resolution",
            "url": "https://image-enhanced.vercel.app",
        },
        {
            "name": "MkCaters - Catering Management System",
            "tech": ["React", "Node.js", "MongoDB", "TypeScript", "Stripe API"],
            "description": "Order management, menu customization and CRM for a caterer",
            "url": "https://www.mkcaters.com/",
        },
    ],
    "skills": {
        "frontend": ["React", "JavaScript", "TypeScript", "HTML/CSS", "TailwindCSS", "Bootstrap"],
        "backend": ["Node.js", "Express.js", "Python", "REST APIs"],
        "databases": ["MongoDB", "MySQL", "SQL"],
        "tools": ["Git/GitHub", "Machine Learning", "Data Science", "OpenCV", "TensorFlow"],
        "languages": ["JavaScript", "TypeScript", "Python", "Java"],
    },
    "education": [
        {
            "degree": "Master of Computer Applications (MCA)",
            "institution": "GLA University",
            "duration": "2023-2025",
        },
        {
            "degree": "Bachelor of Computer Science (BCS)",
            "institution": "St. John's College",
            "duration": "2019-2022",
        },
    ],
    "achievements": [
        "Smart India Hackathon 2024 participant",
        "First place in College Tech Fest 2023 web development competition",
        "Multiple full-stack projects deployed to production",
    ],
}


GREETING_RESPONSES = (
    "Hello! Welcome to my portfolio! I'm **Shivam Yadav**, and I'm really excited to "
    "share my work with you. Whether you're interested in my **full-stack projects**, "
    "my **machine learning work**, or my **professional journey**, I'd love to tell "
    "you about it. What would you like to know first?",

    "Hi there! Great to meet you! I'm **Shivam**, a Full-Stack Developer and recent MCA "
    "graduate. I've built everything from a hotel management system to a "
    "gesture-controlled media player. Which part of my work interests you most?",

    "Hey! Thanks for checking out my portfolio! I like combining **technical depth with "
    "creative problem-solving**, from React front ends to computer vision models. "
    "What would you like to explore?",
)

PROJECT_RESPONSES = (
    "I've built a few projects I'm really proud of:\n\n"
    "**Hotel Management System** - a full booking platform built with **React, Node.js "
    "and MongoDB**: real-time room availability, guest and staff management, automated "
    "billing and **Stripe** payments. [kutkuthotel.me](https://kutkuthotel.me/)\n\n"
    "**Gesture-Controlled Media Player** - control playback with **hand gestures** using "
    "**OpenCV and MediaPipe** for real-time tracking. "
    "[gesturecontroll.netlify.app](https://gesturecontroll.netlify.app/)\n\n"
    "**AI Image Enhancer** - deep learning models that upscale and clean up images.\n\n"
    "**MkCaters** - a catering management site with ordering, menus and payments.\n\n"
    "Which one would you like to hear more about?",

    "My projects cover quite a range! On the web side I built a **hotel management "
    "system** and the **MkCaters** catering platform, both full-stack with React, "
    "Node.js, MongoDB and Stripe. On the AI side there's a **gesture-controlled media "
    "player** (OpenCV + MediaPipe) and an **AI image enhancer** (TensorFlow). Each one "
    "taught me something different about shipping real products. Want the details on "
    "any of them?",
)

SKILL_RESPONSES = (
    "Here's my tech stack:\n\n"
    "**Frontend:** React, JavaScript (ES6+), TypeScript, HTML5/CSS3, Tailwind CSS\n"
    "**Backend:** Node.js, Express.js, Python, REST API design with JWT auth and rate limiting\n"
    "**Databases:** MongoDB (schemas, aggregation pipelines) and MySQL\n"
    "**AI/ML:** TensorFlow, OpenCV, MediaPipe, scikit-learn\n"
    "**Tools:** Git/GitHub, Vercel, Netlify, VS Code\n\n"
    "What technology would you like to know more about?",

    "I'm most at home with **React and Node.js** for full-stack work and **Python** for "
    "data and machine learning. I've used **TensorFlow, OpenCV and MediaPipe** for "
    "computer vision, and **MongoDB and MySQL** for storage. My MCA gave me the theory "
    "and my projects gave me the practice. Anything specific you'd like to dig into?",
)

EXPERIENCE_RESPONSES = (
    "My professional journey so far:\n\n"
    "- **Frontend Developer at Truly Virtually** (Jan 2025 - Jun 2025): responsive, "
    "accessible React interfaces wired to REST APIs\n"
    "- **Data Science & ML Intern at YBI Foundation** (2024): data preprocessing, model "
    "development, predictive analytics\n"
    "- **Data Analytics & Visualization Intern at Accenture** (2024): interactive "
    "dashboards for business decisions\n\n"
    "That mix of development and data work is what I enjoy most. What would you like "
    "to know more about?",

    "I have 6+ months of internship experience across development and data roles: "
    "frontend work at **Truly Virtually**, machine learning at **YBI Foundation**, and "
    "analytics and visualization at **Accenture**. Alongside that I've led several "
    "full-stack projects from idea to deployment. Happy to go deeper on any of them!",
)

CONTACT_RESPONSES = (
    "I'm **actively looking for new opportunities** and would love to connect!\n\n"
    "- **Email:** [shivamydv.work@gmail.com](mailto:shivamydv.work@gmail.com)\n"
    "- **LinkedIn:** https://www.linkedin.com/in/shivamyadav-sy\n"
    "- **GitHub:** https://github.com/sy17258\n"
    "- **Location:** Agra, Uttar Pradesh, India\n\n"
    "I'm open to full-time roles in full-stack, frontend or data science, as well as "
    "freelance and collaborative projects. Don't hesitate to reach out!",

    "The best way to reach me is by email at "
    "[shivamydv.work@gmail.com](mailto:shivamydv.work@gmail.com), or on "
    "[LinkedIn](https://www.linkedin.com/in/shivamyadav-sy). I'm available for "
    "full-time positions and interesting freelance work, and I usually reply quickly.",
)

EDUCATION_RESPONSES = (
    "I have a strong educational foundation!\n\n"
    "**Master of Computer Applications (MCA)** - GLA University (2023-2025), covering "
    "advanced programming, software engineering, databases, machine learning, and "
    "data structures & algorithms.\n\n"
    "**Bachelor of Computer Science (BCS)** - St. John's College (2019-2022).\n\n"
    "The academic side complements my internships and personal projects really well.",

    "I recently completed my **MCA at GLA University**, after a **Bachelor of Computer "
    "Science at St. John's College**. The MCA sharpened my problem-solving and gave me "
    "a solid grounding in software engineering and machine learning, which I apply "
    "directly in my projects.",
)

ABOUT_RESPONSES = (
    "Let me tell you about myself!\n\n"
    "I'm Shivam Yadav, a **Full-Stack Developer and recent MCA graduate** from Agra, "
    "India. I'm comfortable on both the frontend and the backend, I love bringing "
    "machine learning into practical applications, and I'm always learning something "
    "new. I've built everything from hotel management systems to gesture-controlled "
    "media players.",

    "I'm Shivam, a developer who enjoys turning ideas into working products. My "
    "background mixes **full-stack web development** with **data science and machine "
    "learning**, and I'm currently gaining industry experience as a Frontend Developer "
    "while building personal projects on the side.",
)

DEFAULT_RESPONSES = (
    "That's a great question! I can tell you about my full-stack development work, "
    "my projects, or my experience in data science and machine learning. What would "
    "you like to explore?",

    "I can help you learn about my professional background! I'm a full-stack developer "
    "with experience in React, Node.js, Python, and machine learning.\n\n"
    "Would you like to know about:\n"
    "- My projects\n"
    "- My technical skills\n"
    "- My work experience\n"
    "- How to contact me",

    "Thanks for your interest in my work! I've built some fun projects and have solid "
    "experience in both development and data science. Just let me know which area "
    "interests you most!",
)
