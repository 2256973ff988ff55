"""Single-purpose actions over write repositories for users, draft appointments and message logs."""